"""
Appointment scheduler operations.

The booking patient is always the caller; the doctor is a reference that must
resolve to a user with the doctor role. Single-record access is open to both
participants and to admins, and a denial is reported as Forbidden.
"""
import logging

from agenda.extensions import db
from agenda.errors import InvalidReferenceError
from agenda.models import Appointment, AppointmentStatus, AppointmentType, User, Role
from agenda.models.base import coerce_enum
from agenda.services.access import load_for_caller, scope_filter
from agenda.services.filters import FilterSpec
from agenda.utils.validation import (
    require_fields,
    parse_string,
    parse_string_list,
    parse_bool,
    parse_number,
    parse_datetime,
)

logger = logging.getLogger(__name__)

APPOINTMENT_FILTERS = FilterSpec(
    equality={
        'status': (Appointment.status, AppointmentStatus),
        'type': (Appointment.appointment_type, AppointmentType),
    },
)

MAX_DURATION_MINUTES = 24 * 60


def resolve_doctor(doctor_id):
    """Return the doctor user for ``doctor_id`` or raise InvalidReferenceError."""
    doctor = None
    if isinstance(doctor_id, str) and doctor_id.strip():
        doctor = User.query.filter_by(id=doctor_id.strip(), role=Role.DOCTOR.value).first()
    if not doctor:
        raise InvalidReferenceError('Invalid doctor selected', details={'doctor': 'must reference a doctor'})
    return doctor


def _parse_fields(data, partial):
    changes = {}
    if not partial or 'dateTime' in data:
        changes['date_time'] = parse_datetime(data.get('dateTime'), 'dateTime')
    if not partial or 'type' in data:
        changes['appointment_type'] = coerce_enum(AppointmentType, data.get('type'), 'type')
    if data.get('status') is not None or (partial and 'status' in data):
        changes['status'] = coerce_enum(AppointmentStatus, data.get('status'), 'status')
    if data.get('duration') is not None or (partial and 'duration' in data):
        changes['duration'] = parse_number(
            data.get('duration'), 'duration', minimum=1, maximum=MAX_DURATION_MINUTES, integer=True,
        )
    if 'notes' in data:
        changes['notes'] = parse_string(data['notes'], 'notes') or None
    if 'symptoms' in data:
        changes['symptoms'] = parse_string_list(data['symptoms'], 'symptoms')
    if data.get('followUp') is not None or (partial and 'followUp' in data):
        changes['follow_up'] = parse_bool(data.get('followUp'), 'followUp')
    return changes


def create_appointment(data, caller):
    require_fields(data, ['doctor', 'dateTime', 'type'])
    changes = _parse_fields(data, partial=False)
    doctor = resolve_doctor(data['doctor'])

    # Patient always comes from the credential, never from the payload
    appointment = Appointment(patient_id=caller.id, doctor_id=doctor.id, **changes)
    db.session.add(appointment)
    db.session.commit()

    logger.info(f"Appointment {appointment.id} booked by {caller.id} with doctor {doctor.id}")
    return appointment


def list_appointments(caller, params):
    """Appointments the caller participates in, soonest first."""
    query = Appointment.query.filter(scope_filter(Appointment, caller), *APPOINTMENT_FILTERS.build(params))
    return query.order_by(
        Appointment.date_time.asc(),
        Appointment.created_at.asc(),
        Appointment.id.asc(),
    ).all()


def get_appointment(appointment_id, caller):
    return load_for_caller(Appointment, appointment_id, caller, action='view')


def update_appointment(appointment_id, data, caller):
    appointment = load_for_caller(Appointment, appointment_id, caller, action='update')
    changes = _parse_fields(data, partial=True)
    if 'doctor' in data:
        changes['doctor_id'] = resolve_doctor(data['doctor']).id

    for attr, value in changes.items():
        setattr(appointment, attr, value)
    appointment.touch()
    db.session.commit()

    logger.info(f"Appointment {appointment.id} updated by {caller.id}: {sorted(changes)}")
    return appointment


def delete_appointment(appointment_id, caller):
    appointment = load_for_caller(Appointment, appointment_id, caller, action='delete')
    db.session.delete(appointment)
    db.session.commit()
    logger.info(f"Appointment {appointment_id} removed by {caller.id}")
