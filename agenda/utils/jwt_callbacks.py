"""
Flask-JWT-Extended hooks: user lookup for every verified token, and JSON
bodies in the API error format for every credential failure (always 401).
"""
import logging
from flask import jsonify

from agenda.extensions import db
from agenda.errors import AuthenticationError
from agenda.models import User

logger = logging.getLogger(__name__)


def _unauthorized(message):
    return jsonify(AuthenticationError(message).to_dict()), 401


def init_jwt(jwt):
    @jwt.user_lookup_loader
    def load_user(_jwt_header, jwt_data):
        return db.session.get(User, jwt_data['sub'])

    @jwt.user_lookup_error_loader
    def user_lookup_error(_jwt_header, jwt_data):
        logger.info(f"Token presented for unknown user {jwt_data.get('sub')}")
        return _unauthorized('User not found')

    @jwt.unauthorized_loader
    def missing_token(reason):
        return _unauthorized('Authentication required')

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return _unauthorized('Invalid token')

    @jwt.expired_token_loader
    def expired_token(_jwt_header, _jwt_data):
        return _unauthorized('Token expired')

    @jwt.revoked_token_loader
    def revoked_token(_jwt_header, _jwt_data):
        return _unauthorized('Token has been revoked')

    @jwt.needs_fresh_token_loader
    def stale_token(_jwt_header, _jwt_data):
        return _unauthorized('Fresh login required')
