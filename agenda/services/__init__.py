from .access import Caller, can_access, scope_filter, load_for_caller
from .filters import FilterSpec

__all__ = ["Caller", "can_access", "scope_filter", "load_for_caller", "FilterSpec"]
