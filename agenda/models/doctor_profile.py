"""
Doctor directory data: one profile per doctor user, plus patient reviews.
Available slots are descriptive only; nothing schedules against them.
"""
from enum import Enum

from agenda.extensions import db
from .base import TimestampMixin, new_id, utcnow, isoformat


class Weekday(str, Enum):
    MONDAY = 'Monday'
    TUESDAY = 'Tuesday'
    WEDNESDAY = 'Wednesday'
    THURSDAY = 'Thursday'
    FRIDAY = 'Friday'
    SATURDAY = 'Saturday'
    SUNDAY = 'Sunday'


class DoctorProfile(db.Model, TimestampMixin):
    __tablename__ = 'doctor_profiles'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    user_id = db.Column(db.String(32), db.ForeignKey('users.id', ondelete='CASCADE'), unique=True, nullable=False, index=True)

    specialization = db.Column(db.String(120), nullable=False, index=True)
    qualifications = db.Column(db.JSON, default=list)
    experience = db.Column(db.Integer, nullable=False, default=0)  # years
    available_slots = db.Column(db.JSON, default=list)  # [{day, startTime, endTime}]
    consultation_fee = db.Column(db.Float, nullable=False, default=0)
    rating = db.Column(db.Float, nullable=False, default=0, index=True)  # 0-5, mean of reviews
    about = db.Column(db.Text)
    languages = db.Column(db.JSON, default=list)
    accepting_new_patients = db.Column(db.Boolean, nullable=False, default=True)

    user = db.relationship('User', backref=db.backref('doctor_profile', uselist=False, cascade='all, delete-orphan'))
    reviews = db.relationship(
        'DoctorReview',
        backref='profile',
        cascade='all, delete-orphan',
        order_by='DoctorReview.date.desc()',
        lazy='select',
    )

    def recalculate_rating(self):
        ratings = [review.rating for review in self.reviews]
        self.rating = round(sum(ratings) / len(ratings), 1) if ratings else 0

    def to_dict(self, include_reviews=False):
        data = {
            'id': self.id,
            'user': self.user_id,
            'specialization': self.specialization,
            'qualifications': list(self.qualifications or []),
            'experience': self.experience,
            'availableSlots': list(self.available_slots or []),
            'consultationFee': self.consultation_fee,
            'rating': self.rating,
            'reviewCount': len(self.reviews),
            'about': self.about,
            'languages': list(self.languages or []),
            'acceptingNewPatients': bool(self.accepting_new_patients),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if include_reviews:
            data['reviews'] = [review.to_dict() for review in self.reviews]
        return data

    def __repr__(self):
        return f"<DoctorProfile {self.user_id} - {self.specialization}>"


class DoctorReview(db.Model):
    __tablename__ = 'doctor_reviews'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    profile_id = db.Column(db.String(32), db.ForeignKey('doctor_profiles.id', ondelete='CASCADE'), nullable=False, index=True)
    patient_id = db.Column(db.String(32), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    rating = db.Column(db.Integer, nullable=False)  # 1-5
    comment = db.Column(db.Text)
    date = db.Column(db.DateTime, nullable=False, default=utcnow)

    patient = db.relationship('User', foreign_keys=[patient_id])

    def to_dict(self):
        return {
            'id': self.id,
            'patient': self.patient.to_summary() if self.patient else {'id': self.patient_id},
            'rating': self.rating,
            'comment': self.comment,
            'date': isoformat(self.date),
        }
