from .decorators import require_role, current_caller

__all__ = [
    "require_role",
    "current_caller",
]
