from enum import Enum
from sqlalchemy.orm import validates

from agenda.extensions import db
from .base import TimestampMixin, new_id, isoformat, coerce_enum


class TaskStatus(str, Enum):
    PENDING = 'pending'
    IN_PROGRESS = 'in-progress'
    COMPLETED = 'completed'


class TaskPriority(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'


# Sort weight, higher first when listing
PRIORITY_RANK = {
    TaskPriority.LOW.value: 1,
    TaskPriority.MEDIUM.value: 2,
    TaskPriority.HIGH.value: 3,
}


class Task(db.Model, TimestampMixin):
    __tablename__ = 'tasks'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    user_id = db.Column(db.String(32), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, default='')
    status = db.Column(db.String(20), nullable=False, default=TaskStatus.PENDING.value, index=True)
    priority = db.Column(db.String(10), nullable=False, default=TaskPriority.MEDIUM.value, index=True)
    due_date = db.Column(db.Date, nullable=True, index=True)
    category = db.Column(db.String(100), nullable=True, index=True)

    owner = db.relationship('User', backref=db.backref('tasks', lazy='dynamic', cascade='all, delete-orphan'))

    @validates('status')
    def _validate_status(self, key, value):
        return coerce_enum(TaskStatus, value, 'status')

    @validates('priority')
    def _validate_priority(self, key, value):
        return coerce_enum(TaskPriority, value, 'priority')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'title': self.title,
            'description': self.description or '',
            'status': self.status,
            'priority': self.priority,
            'dueDate': isoformat(self.due_date),
            'category': self.category,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Task {self.id} '{self.title}' ({self.status})>"
