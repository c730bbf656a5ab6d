"""Role lifecycle management."""

from .service import RoleService
from .cache import RoleListingCache, NullRoleCache
from .validation import RoleInput, RoleCloneInput

__all__ = [
    "RoleService",
    "RoleListingCache",
    "NullRoleCache",
    "RoleInput",
    "RoleCloneInput",
]
