"""
Doctor directory: doctor profiles and patient reviews.
"""
import logging
from sqlalchemy import func

from agenda.extensions import db
from agenda.errors import ValidationError, NotFoundError
from agenda.models import User, Role, DoctorProfile, DoctorReview, Weekday
from agenda.models.base import coerce_enum
from agenda.services.filters import FilterSpec
from agenda.utils.validation import (
    require_fields,
    parse_string,
    parse_string_list,
    parse_bool,
    parse_number,
    parse_time_of_day,
    parse_query_bool,
)

logger = logging.getLogger(__name__)

DOCTOR_FILTERS = FilterSpec(search_columns=(User.first_name, User.last_name))


def _doctor_entry(user, profile, include_reviews=False):
    entry = user.to_summary()
    entry['profile'] = profile.to_dict(include_reviews=include_reviews) if profile else None
    return entry


def list_doctors(params):
    """Doctors with their profiles, best rated first."""
    query = (
        db.session.query(User, DoctorProfile)
        .outerjoin(DoctorProfile, DoctorProfile.user_id == User.id)
        .filter(User.role == Role.DOCTOR.value, *DOCTOR_FILTERS.build(params))
    )

    specialization = (params.get('specialization') or '').strip()
    if specialization:
        query = query.filter(func.lower(DoctorProfile.specialization) == specialization.lower())

    accepting = parse_query_bool(params.get('acceptingNewPatients'), 'acceptingNewPatients')
    if accepting is not None:
        query = query.filter(DoctorProfile.accepting_new_patients == accepting)

    rows = query.order_by(
        func.coalesce(DoctorProfile.rating, 0).desc(),
        User.last_name.asc(),
        User.id.asc(),
    ).all()
    return [_doctor_entry(user, profile) for user, profile in rows]


def get_doctor(doctor_id):
    doctor = User.query.filter_by(id=doctor_id, role=Role.DOCTOR.value).first()
    if not doctor:
        raise NotFoundError('Doctor not found')
    return _doctor_entry(doctor, doctor.doctor_profile, include_reviews=True)


def _parse_slots(value):
    if not isinstance(value, list):
        raise ValidationError('Field "availableSlots" must be an array', details={'availableSlots': 'must be an array'})
    slots = []
    for index, slot in enumerate(value):
        field = f'availableSlots[{index}]'
        if not isinstance(slot, dict):
            raise ValidationError(f'Field "{field}" must be an object', details={field: 'must be an object'})
        day = coerce_enum(Weekday, slot.get('day'), f'{field}.day')
        start = parse_time_of_day(slot.get('startTime'), f'{field}.startTime')
        end = parse_time_of_day(slot.get('endTime'), f'{field}.endTime')
        if start >= end:
            raise ValidationError(
                f'Field "{field}" must start before it ends',
                details={field: 'startTime must be before endTime'},
            )
        slots.append({'day': day, 'startTime': start, 'endTime': end})
    return slots


def _parse_profile_fields(data):
    changes = {}
    if 'specialization' in data:
        changes['specialization'] = parse_string(data['specialization'], 'specialization', required=True, max_length=120)
    if 'qualifications' in data:
        changes['qualifications'] = parse_string_list(data['qualifications'], 'qualifications')
    if 'experience' in data:
        changes['experience'] = parse_number(data['experience'], 'experience', minimum=0, integer=True)
    if 'availableSlots' in data:
        changes['available_slots'] = _parse_slots(data['availableSlots'])
    if 'consultationFee' in data:
        changes['consultation_fee'] = parse_number(data['consultationFee'], 'consultationFee', minimum=0)
    if 'about' in data:
        changes['about'] = parse_string(data['about'], 'about') or None
    if 'languages' in data:
        changes['languages'] = parse_string_list(data['languages'], 'languages')
    if 'acceptingNewPatients' in data:
        changes['accepting_new_patients'] = parse_bool(data['acceptingNewPatients'], 'acceptingNewPatients')
    return changes


def upsert_profile(data, caller):
    """Create or partially update the calling doctor's own profile.

    Returns ``(profile, created)``.
    """
    profile = DoctorProfile.query.filter_by(user_id=caller.id).first()
    created = profile is None
    if created:
        require_fields(data, ['specialization', 'experience', 'consultationFee'])

    changes = _parse_profile_fields(data)
    if created:
        profile = DoctorProfile(user_id=caller.id, **changes)
        db.session.add(profile)
    else:
        for attr, value in changes.items():
            setattr(profile, attr, value)
        profile.touch()
    db.session.commit()

    logger.info(f"Doctor profile {'created' if created else 'updated'} for {caller.id}")
    return profile, created


def add_review(doctor_id, data, caller):
    """Attach a patient review to a doctor's profile and refresh the rating."""
    profile = (
        DoctorProfile.query.join(User, DoctorProfile.user_id == User.id)
        .filter(User.id == doctor_id, User.role == Role.DOCTOR.value)
        .first()
    )
    if not profile:
        raise NotFoundError('Doctor profile not found')

    require_fields(data, ['rating'])
    review = DoctorReview(
        patient_id=caller.id,
        rating=parse_number(data['rating'], 'rating', minimum=1, maximum=5, integer=True),
        comment=parse_string(data.get('comment'), 'comment') or None,
    )
    profile.reviews.append(review)
    profile.recalculate_rating()
    profile.touch()
    db.session.commit()

    logger.info(f"Review {review.id} added to doctor {doctor_id} by {caller.id}")
    return profile
