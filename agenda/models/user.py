from enum import Enum
from sqlalchemy.orm import validates

from agenda.extensions import db, bcrypt
from .base import TimestampMixin, new_id, isoformat, coerce_enum


class Role(str, Enum):
    PATIENT = 'patient'
    DOCTOR = 'doctor'
    ADMIN = 'admin'


class User(db.Model, TimestampMixin):
    __tablename__ = 'users'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # Personal Information
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)

    # Role - 'patient', 'doctor' or 'admin'; the task tracker ignores it
    role = db.Column(db.String(20), nullable=False, default=Role.PATIENT.value, index=True)

    @validates('role')
    def _validate_role(self, key, value):
        return coerce_enum(Role, value, 'role')

    @validates('email')
    def _normalize_email(self, key, value):
        return value.strip().lower() if value else value

    def set_password(self, password):
        """Hash and set password"""
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        """Check if provided password matches hash"""
        return bcrypt.check_password_hash(self.password_hash, password)

    def is_doctor(self):
        return self.role == Role.DOCTOR.value

    def is_admin(self):
        return self.role == Role.ADMIN.value

    def to_summary(self):
        """Short form embedded in appointments and reviews."""
        return {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
        }

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'role': self.role,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<User {self.email} ({self.first_name} {self.last_name}) - {self.role}>"
