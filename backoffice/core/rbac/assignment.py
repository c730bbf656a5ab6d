"""Role assignment variants for principals.

A principal's ``role_type``, ``role_id`` and ``custom_permissions`` columns
are only meaningful in specific combinations. Every write goes through one
of these variants so the columns can never disagree:

    SuperAdmin            role_type=super_admin, no role, no override
    RoleAssigned(id)      role_type=custom_role, role_id=id, no override
    CustomOverride(m)     role_type=user, no role, custom_permissions=m
    PlainUser             role_type=user, no role, no override
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union
from uuid import UUID

from .permissions import PermissionMatrix, copy_matrix, normalize_matrix


@dataclass(frozen=True)
class SuperAdmin:
    role_type: str = field(default="super_admin", init=False)


@dataclass(frozen=True)
class RoleAssigned:
    role_id: UUID
    role_type: str = field(default="custom_role", init=False)


@dataclass(frozen=True)
class CustomOverride:
    permissions: PermissionMatrix
    role_type: str = field(default="user", init=False)

    def __post_init__(self):
        object.__setattr__(self, "permissions", copy_matrix(self.permissions))


@dataclass(frozen=True)
class PlainUser:
    role_type: str = field(default="user", init=False)


RoleAssignment = Union[SuperAdmin, RoleAssigned, CustomOverride, PlainUser]


def _value(value: Any) -> Any:
    return getattr(value, "value", value)


def assignment_for(principal) -> RoleAssignment:
    """
    Read the variant a stored principal represents.

    Rows written before assignments were enforced may carry inconsistent
    columns; they are read with the same precedence the resolver uses
    (role first, then override).
    """
    role_type = _value(getattr(principal, "role_type", None))
    if role_type == "super_admin":
        return SuperAdmin()
    role_id = getattr(principal, "role_id", None)
    if role_id is not None:
        return RoleAssigned(role_id)
    custom = getattr(principal, "custom_permissions", None)
    if custom is not None:
        return CustomOverride(custom)
    return PlainUser()


def apply_assignment(principal, assignment: RoleAssignment) -> None:
    """Write an assignment onto a principal, clearing the unused columns."""
    principal.role_type = assignment.role_type
    principal.role_id = assignment.role_id if isinstance(assignment, RoleAssigned) else None
    principal.custom_permissions = (
        copy_matrix(assignment.permissions) if isinstance(assignment, CustomOverride) else None
    )


def parse_assignment(
    role_type: str,
    role_id: Optional[Union[str, UUID]] = None,
    custom_permissions: Optional[Mapping] = None,
) -> RoleAssignment:
    """
    Build a variant from loose request fields.

    Raises:
        ValueError: If the fields do not describe exactly one variant
    """
    role_type = _value(role_type)
    if role_type == "super_admin":
        if role_id is not None or custom_permissions is not None:
            raise ValueError("Super admins cannot have a role or custom permissions")
        return SuperAdmin()
    if role_type == "custom_role":
        if role_id is None:
            raise ValueError("Custom role requires a role_id")
        if custom_permissions is not None:
            raise ValueError("A user with a role cannot also have custom permissions")
        try:
            return RoleAssigned(role_id if isinstance(role_id, UUID) else UUID(str(role_id)))
        except ValueError:
            raise ValueError("Invalid role ID") from None
    if role_type == "user":
        if role_id is not None:
            raise ValueError("Only custom_role users can be assigned a role")
        if custom_permissions is None:
            return PlainUser()
        return CustomOverride(normalize_matrix(custom_permissions))
    raise ValueError(f"Unknown role type: {role_type}")
