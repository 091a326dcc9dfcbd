import uuid
from datetime import datetime, timedelta, timezone
from sqlalchemy import event

from agenda.extensions import db
from agenda.errors import ValidationError


def utcnow():
    """Naive UTC timestamp, the form stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id():
    """Opaque record id."""
    return uuid.uuid4().hex


def isoformat(value):
    return value.isoformat() if value else None


def coerce_enum(enum_cls, value, field):
    """Return the string value of ``value`` in ``enum_cls`` or raise ValidationError."""
    if isinstance(value, enum_cls):
        return value.value
    try:
        return enum_cls(value).value
    except ValueError:
        allowed = [member.value for member in enum_cls]
        raise ValidationError(
            f'Invalid {field}. Must be one of: {", ".join(allowed)}',
            details={field: f'must be one of {allowed}'},
        )


class TimestampMixin:
    created_at = db.Column(db.DateTime, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False)

    def touch(self):
        """Move updated_at forward, strictly past its previous value."""
        now = utcnow()
        if self.updated_at is not None and now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now


@event.listens_for(TimestampMixin, 'before_insert', propagate=True)
def _stamp_created(mapper, connection, target):
    # Both stamps share one clock reading so createdAt == updatedAt on create
    now = utcnow()
    target.created_at = now
    target.updated_at = now
