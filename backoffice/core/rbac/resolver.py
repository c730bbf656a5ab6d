"""Effective permission resolution.

Exactly one source is authoritative per principal:

1. ``super_admin`` principals hold every permission; no matrix is read.
2. If a Role is attached, the role's matrix decides.
3. Only when no Role is attached does the principal's own
   ``custom_permissions`` matrix apply.

Sources are never merged. A principal with neither resolves to no
permissions at all.
"""

from typing import Any, Optional, Set

from sqlalchemy.orm import Session

from .permissions import (
    ALL_MODULES,
    Module,
    PermissionMatrix,
    full_matrix,
    get,
    list_viewable_modules,
)

_UNSET: Any = object()


def _role_type(principal) -> Optional[str]:
    value = getattr(principal, "role_type", None)
    return getattr(value, "value", value)


def is_super_admin(principal) -> bool:
    """Check if the principal is a super admin."""
    return principal is not None and _role_type(principal) == "super_admin"


def is_admin(principal) -> bool:
    """Check if the principal has any back office access (super admin or custom role)."""
    return principal is not None and _role_type(principal) in ("super_admin", "custom_role")


def _attached_role(principal, role):
    if role is not _UNSET:
        return role
    return getattr(principal, "role", None)


def effective_permissions(principal, role=_UNSET) -> Optional[PermissionMatrix]:
    """
    Compute the principal's effective permission matrix.

    Args:
        principal: User record (or any object with role_type/custom_permissions)
        role: Role attached to the principal. Defaults to ``principal.role``.

    Returns:
        The authoritative matrix, or None when the principal has no permissions
    """
    if principal is None:
        return None

    if is_super_admin(principal):
        return full_matrix()

    role = _attached_role(principal, role)
    if role is not None:
        return role.permissions or {}

    custom = getattr(principal, "custom_permissions", None)
    if custom is not None:
        return custom

    return None


def has_permission(principal, module: Module, action, role=_UNSET) -> bool:
    """Check if a principal holds ``module.action``."""
    if principal is None:
        return False
    if is_super_admin(principal):
        return True
    return get(effective_permissions(principal, role), module, action)


def accessible_modules(principal, role=_UNSET) -> Set[Module]:
    """Modules the principal can at least view. Used to build navigation."""
    if principal is None:
        return set()
    if is_super_admin(principal):
        return set(ALL_MODULES)
    return list_viewable_modules(effective_permissions(principal, role))


def load_role(db: Session, principal):
    """Fetch the Role referenced by ``principal.role_id``, or None."""
    from backoffice.db.models import Role

    role_id = getattr(principal, "role_id", None)
    if role_id is None:
        return None
    return db.query(Role).filter(Role.id == role_id).first()
