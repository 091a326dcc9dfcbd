"""
Authorization guard.

Each resource type registers an AccessPolicy: a ``can_access(record, caller)``
predicate for single-record operations, the equivalent scope predicate for
list queries, and whether a denial hides the record's existence.
"""
from dataclasses import dataclass

from agenda.extensions import db
from agenda.errors import NotFoundError, AuthorizationError
from agenda.models import Task, Appointment, Role


@dataclass(frozen=True)
class Caller:
    """Resolved identity of the authenticated user."""
    id: str
    role: str

    @property
    def is_admin(self):
        return self.role == Role.ADMIN.value

    @property
    def is_doctor(self):
        return self.role == Role.DOCTOR.value


@dataclass(frozen=True)
class AccessPolicy:
    label: str
    can_access: object
    scope: object
    # True: deny as NotFound so a non-owner cannot confirm the record exists
    hide_existence: bool


_POLICIES = {}


def register_policy(model, label, can_access, scope, hide_existence):
    _POLICIES[model] = AccessPolicy(label, can_access, scope, hide_existence)


def policy_for(model):
    try:
        return _POLICIES[model]
    except KeyError:
        raise LookupError(f'No access policy registered for {model.__name__}')


def can_access(record, caller):
    return policy_for(type(record)).can_access(record, caller)


def scope_filter(model, caller):
    """SQLAlchemy clause limiting ``model`` rows to those ``caller`` may list."""
    return policy_for(model).scope(caller)


def load_for_caller(model, record_id, caller, action='access'):
    """Fetch a record by id and apply the model's access policy."""
    policy = policy_for(model)
    record = db.session.get(model, record_id)
    if record is None:
        raise NotFoundError(f'{policy.label} not found')
    if not policy.can_access(record, caller):
        if policy.hide_existence:
            raise NotFoundError(f'{policy.label} not found')
        raise AuthorizationError(f'Not authorized to {action} this {policy.label.lower()}')
    return record


def _task_can_access(task, caller):
    return task.user_id == caller.id


def _task_scope(caller):
    return Task.user_id == caller.id


def _appointment_can_access(appointment, caller):
    return caller.id in (appointment.patient_id, appointment.doctor_id) or caller.is_admin


def _appointment_scope(caller):
    # Doctors list the appointments booked with them; everyone else lists their own bookings
    if caller.is_doctor:
        return Appointment.doctor_id == caller.id
    return Appointment.patient_id == caller.id


register_policy(Task, 'Task', _task_can_access, _task_scope, hide_existence=True)
register_policy(Appointment, 'Appointment', _appointment_can_access, _appointment_scope, hide_existence=False)
