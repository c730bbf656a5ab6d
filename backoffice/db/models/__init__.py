"""Database models for the back office."""

from backoffice.db.models.user import User, UserStatus, RoleType
from backoffice.db.models.role import Role

__all__ = [
    "User",
    "UserStatus",
    "RoleType",
    "Role",
]
