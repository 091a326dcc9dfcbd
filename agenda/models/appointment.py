from enum import Enum
from sqlalchemy.orm import validates

from agenda.extensions import db
from .base import TimestampMixin, new_id, isoformat, coerce_enum


class AppointmentStatus(str, Enum):
    SCHEDULED = 'scheduled'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class AppointmentType(str, Enum):
    IN_PERSON = 'in-person'
    TELEMEDICINE = 'telemedicine'


DEFAULT_DURATION_MINUTES = 30


class Appointment(db.Model, TimestampMixin):
    __tablename__ = 'appointments'
    __table_args__ = (
        db.Index('ix_appointments_date_time_doctor', 'date_time', 'doctor_id'),
        db.Index('ix_appointments_date_time_patient', 'date_time', 'patient_id'),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    patient_id = db.Column(db.String(32), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    doctor_id = db.Column(db.String(32), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    date_time = db.Column(db.DateTime, nullable=False)
    duration = db.Column(db.Integer, nullable=False, default=DEFAULT_DURATION_MINUTES)  # minutes
    status = db.Column(db.String(20), nullable=False, default=AppointmentStatus.SCHEDULED.value, index=True)
    appointment_type = db.Column('type', db.String(20), nullable=False)
    notes = db.Column(db.Text)
    symptoms = db.Column(db.JSON, default=list)
    follow_up = db.Column(db.Boolean, nullable=False, default=False)

    patient = db.relationship('User', foreign_keys=[patient_id], lazy='joined')
    doctor = db.relationship('User', foreign_keys=[doctor_id], lazy='joined')

    @validates('status')
    def _validate_status(self, key, value):
        return coerce_enum(AppointmentStatus, value, 'status')

    @validates('appointment_type')
    def _validate_type(self, key, value):
        return coerce_enum(AppointmentType, value, 'type')

    def to_dict(self):
        return {
            'id': self.id,
            'patient': self.patient.to_summary() if self.patient else {'id': self.patient_id},
            'doctor': self.doctor.to_summary() if self.doctor else {'id': self.doctor_id},
            'dateTime': isoformat(self.date_time),
            'duration': self.duration,
            'status': self.status,
            'type': self.appointment_type,
            'notes': self.notes,
            'symptoms': list(self.symptoms or []),
            'followUp': bool(self.follow_up),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Appointment {self.patient_id} - {self.doctor_id} on {self.date_time}>"
