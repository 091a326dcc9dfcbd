from functools import wraps
from flask_jwt_extended import get_current_user

from agenda.errors import AuthenticationError, AuthorizationError
from agenda.services.access import Caller


def current_caller():
    """
    Caller for the request, built from the user loaded by the JWT user lookup.
    Must be called inside a @jwt_required() route.
    """
    user = get_current_user()
    if user is None:
        raise AuthenticationError()
    return Caller(id=user.id, role=user.role)


def require_role(*roles):
    """
    Decorator to require specific roles
    Usage: @require_role('doctor', 'admin')
    """
    allowed = {getattr(role, 'value', role) for role in roles}

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            """
            Require that the current JWT-authenticated user has one of the given roles.
            Must be used together with @jwt_required() on the route.
            """
            caller = current_caller()
            if caller.role not in allowed:
                raise AuthorizationError(f'Permission denied. Required roles: {", ".join(sorted(allowed))}')
            return f(*args, **kwargs)
        return decorated_function
    return decorator
