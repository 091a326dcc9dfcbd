"""
API error taxonomy.

Services raise these; the handler registered in create_app() turns them into
the JSON error envelope: {"success": false, "error": ..., "code": ...}.
"""


class ApiError(Exception):
    status_code = 500
    code = 'server_error'
    default_message = 'Internal server error'

    def __init__(self, message=None, details=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details

    def to_dict(self):
        body = {
            'success': False,
            'error': self.message,
            'code': self.code,
        }
        if self.details:
            body['details'] = self.details
        return body


class ValidationError(ApiError):
    status_code = 400
    code = 'validation_error'
    default_message = 'Invalid request data'


class InvalidReferenceError(ApiError):
    """A referenced entity (e.g. a doctor) does not exist or does not qualify."""
    status_code = 400
    code = 'reference_error'
    default_message = 'Invalid reference'


class AuthenticationError(ApiError):
    status_code = 401
    code = 'authentication_error'
    default_message = 'Authentication required'


class AuthorizationError(ApiError):
    status_code = 403
    code = 'forbidden'
    default_message = 'Permission denied'


class NotFoundError(ApiError):
    status_code = 404
    code = 'not_found'
    default_message = 'Not found'


class ServerError(ApiError):
    pass
