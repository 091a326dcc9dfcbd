"""
Registration, login and token issuing.

Login failures never say whether the email exists: unknown email and wrong
password raise the same AuthenticationError.
"""
import logging
import re
from flask import current_app
from flask_jwt_extended import create_access_token, create_refresh_token
from sqlalchemy.exc import IntegrityError

from agenda.extensions import db
from agenda.errors import ValidationError, AuthenticationError
from agenda.models import User, Role
from agenda.models.base import coerce_enum
from agenda.utils.validation import require_fields, parse_string

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = 'Invalid credentials'


def _parse_email(value):
    email = parse_string(value, 'email', required=True, max_length=120).lower()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError('Please include a valid email', details={'email': 'must be a valid email address'})
    return email


def register_user(data):
    require_fields(data, ['email', 'password', 'firstName', 'lastName'])
    email = _parse_email(data['email'])

    password = data['password']
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f'Password must be at least {MIN_PASSWORD_LENGTH} characters',
            details={'password': f'must be at least {MIN_PASSWORD_LENGTH} characters'},
        )

    role = coerce_enum(Role, data.get('role') or Role.PATIENT.value, 'role')
    if role == Role.ADMIN.value and not current_app.config.get('ALLOW_ADMIN_REGISTRATION'):
        raise ValidationError('Admin accounts cannot be self-registered', details={'role': 'admin is not allowed'})

    if User.query.filter_by(email=email).first():
        raise ValidationError('User already exists', details={'email': 'is already registered'})

    user = User(
        email=email,
        first_name=parse_string(data['firstName'], 'firstName', required=True, max_length=100),
        last_name=parse_string(data['lastName'], 'lastName', required=True, max_length=100),
        role=role,
    )
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.session.rollback()
        raise ValidationError('User already exists', details={'email': 'is already registered'})

    logger.info(f"Registered user {user.id} ({user.role})")
    return user


def authenticate(data):
    """Return the user matching email/password or raise AuthenticationError."""
    require_fields(data, ['email', 'password'])
    email = data['email'].strip().lower() if isinstance(data['email'], str) else None
    password = data['password'] if isinstance(data['password'], str) else None

    user = User.query.filter_by(email=email).first() if email else None
    if not user or password is None or not user.check_password(password):
        logger.info("Failed login attempt")
        raise AuthenticationError(INVALID_CREDENTIALS)
    return user


def issue_tokens(user):
    """Access + refresh tokens; identity is the user id, role travels as a claim."""
    additional_claims = {'role': user.role}
    expires = current_app.config['JWT_ACCESS_TOKEN_EXPIRES']
    return {
        'access_token': create_access_token(identity=user.id, additional_claims=additional_claims, fresh=True),
        'refresh_token': create_refresh_token(identity=user.id, additional_claims=additional_claims),
        'token_type': 'bearer',
        'expires_in': int(expires.total_seconds()),
    }


def refresh_access_token(user):
    additional_claims = {'role': user.role}
    expires = current_app.config['JWT_ACCESS_TOKEN_EXPIRES']
    return {
        'access_token': create_access_token(identity=user.id, additional_claims=additional_claims, fresh=False),
        'token_type': 'bearer',
        'expires_in': int(expires.total_seconds()),
    }


def update_profile(user, data):
    """Self-service edit of the caller's names; email and role are not editable here."""
    changed = False
    if 'firstName' in data:
        user.first_name = parse_string(data['firstName'], 'firstName', required=True, max_length=100)
        changed = True
    if 'lastName' in data:
        user.last_name = parse_string(data['lastName'], 'lastName', required=True, max_length=100)
        changed = True
    if changed:
        user.touch()
        db.session.commit()
    return user
