"""
Request payload parsing helpers.

Each helper either returns a clean Python value or raises ValidationError
naming the offending field.
"""
import re
from datetime import datetime, timezone

from flask import request

from agenda.errors import ValidationError

TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


def get_json_body():
    """Return the JSON object body of the current request."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def require_fields(data, fields):
    """Raise ValidationError listing every required field that is missing or blank."""
    missing = []
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    if missing:
        raise ValidationError(
            f'Field "{missing[0]}" is required' if len(missing) == 1
            else f'Fields {", ".join(missing)} are required',
            details={field: 'is required' for field in missing},
        )


def parse_string(value, field, required=False, max_length=None):
    if value is None:
        if required:
            raise ValidationError(f'Field "{field}" is required', details={field: 'is required'})
        return None
    if not isinstance(value, str):
        raise ValidationError(f'Field "{field}" must be a string', details={field: 'must be a string'})
    value = value.strip()
    if required and not value:
        raise ValidationError(f'Field "{field}" is required', details={field: 'is required'})
    if max_length and len(value) > max_length:
        raise ValidationError(
            f'Field "{field}" must be at most {max_length} characters',
            details={field: f'must be at most {max_length} characters'},
        )
    return value


def parse_string_list(value, field):
    """Accept a list of strings; blanks are dropped and entries trimmed."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValidationError(f'Field "{field}" must be an array of strings', details={field: 'must be an array of strings'})
    return [item.strip() for item in value if item.strip()]


def parse_bool(value, field):
    if isinstance(value, bool):
        return value
    raise ValidationError(f'Field "{field}" must be a boolean', details={field: 'must be a boolean'})


def parse_number(value, field, minimum=None, maximum=None, integer=False):
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f'Field "{field}" must be a number', details={field: 'must be a number'})
    if integer and int(value) != value:
        raise ValidationError(f'Field "{field}" must be an integer', details={field: 'must be an integer'})
    if minimum is not None and value < minimum:
        raise ValidationError(f'Field "{field}" must be at least {minimum}', details={field: f'must be >= {minimum}'})
    if maximum is not None and value > maximum:
        raise ValidationError(f'Field "{field}" must be at most {maximum}', details={field: f'must be <= {maximum}'})
    return int(value) if integer else value


def parse_date(value, field):
    """Parse YYYY-MM-DD (or a full ISO timestamp) into a date; None/'' clears."""
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise ValidationError(f'Field "{field}" must be a date string', details={field: 'must be YYYY-MM-DD'})
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        pass
    try:
        return parse_datetime(value, field).date()
    except ValidationError:
        raise ValidationError('Invalid date format. Use YYYY-MM-DD', details={field: 'must be YYYY-MM-DD'})


def parse_datetime(value, field):
    """Parse an ISO 8601 timestamp into a naive UTC datetime."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'Field "{field}" must be an ISO 8601 date-time', details={field: 'must be ISO 8601'})
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f'Field "{field}" must be an ISO 8601 date-time', details={field: 'must be ISO 8601'})
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_time_of_day(value, field):
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise ValidationError(f'Field "{field}" must be a HH:MM time', details={field: 'must be HH:MM'})
    return value


def parse_query_bool(value, field):
    """Query-string booleans: 'true'/'false' (case-insensitive); None when absent."""
    if value is None or value == '':
        return None
    lowered = value.strip().lower()
    if lowered in ('true', '1'):
        return True
    if lowered in ('false', '0'):
        return False
    raise ValidationError(f'Query parameter "{field}" must be true or false', details={field: 'must be true or false'})
