"""Principal role assignment.

The only write path for a user's ``role_type``, ``role_id`` and
``custom_permissions``. Assignments go through the ``RoleAssignment``
variants so the three columns always agree.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from backoffice.core.exceptions import (
    ForbiddenError,
    NotFoundError,
    RoleValidationError,
)
from backoffice.core.rbac.assignment import (
    RoleAssigned,
    RoleAssignment,
    SuperAdmin,
    apply_assignment,
    assignment_for,
    parse_assignment,
)
from backoffice.core.rbac.permissions import copy_matrix, granted_permissions
from backoffice.core.rbac.resolver import accessible_modules, effective_permissions, is_super_admin
from backoffice.core.results import service_action
from backoffice.core.roles.cache import NullRoleCache, RoleListingCache
from backoffice.core.roles.service import as_uuid, require_caller
from backoffice.db.models import Role, User, UserStatus

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"


def principal_to_dict(user: User) -> Dict[str, Any]:
    return {
        "id": str(user.id),
        "email": user.email,
        "full_name": user.full_name,
        "status": user.status,
        "role_type": user.role_type,
        "role_id": str(user.role_id) if user.role_id else None,
        "custom_permissions": copy_matrix(user.custom_permissions) if user.custom_permissions is not None else None,
    }


def permission_summary(user: User) -> Dict[str, Any]:
    """
    What the navigation and UI need to know about a principal's access.

    Inactive accounts hold nothing, matching the access gate.
    """
    if user.status != UserStatus.ACTIVE.value:
        modules, matrix = [], None
    else:
        modules = sorted(m.value for m in accessible_modules(user))
        matrix = effective_permissions(user)
    return {
        "user_id": str(user.id),
        "status": user.status,
        "role_type": user.role_type,
        "is_super_admin": is_super_admin(user),
        "modules": modules,
        "permissions": granted_permissions(matrix),
    }


class PrincipalService:
    """Assigns roles and statuses to users."""

    def __init__(self, db: Session, cache: Optional[RoleListingCache] = None):
        self.db = db
        self.cache = cache or NullRoleCache()

    @service_action
    def assign_role(
        self,
        caller,
        user_id: Union[str, UUID],
        assignment: Union[RoleAssignment, Dict[str, Any]],
    ) -> Dict[str, Any]:
        """
        Change how a user's permissions are determined.

        Args:
            caller: The authenticated user performing the change
            user_id: Target user
            assignment: A RoleAssignment variant, or a dict with
                role_type/role_id/custom_permissions

        Returns:
            The updated user
        """
        require_caller(caller)

        if isinstance(assignment, dict):
            try:
                assignment = parse_assignment(
                    assignment.get("role_type"),
                    assignment.get("role_id"),
                    assignment.get("custom_permissions"),
                )
            except ValueError as e:
                raise RoleValidationError(str(e)) from e

        target = self._get_user(user_id)

        if target.id == caller.id:
            raise ForbiddenError("You cannot modify your own role")

        if isinstance(assignment, SuperAdmin) and not is_super_admin(caller):
            raise ForbiddenError("Only super admins can assign super admin role")

        if isinstance(assignment, RoleAssigned):
            role = self.db.query(Role).filter(Role.id == assignment.role_id).first()
            if not role:
                raise NotFoundError("Role not found")

        previous = assignment_for(target)
        apply_assignment(target, assignment)
        target.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(target)

        logger.info(
            "Role assignment changed for %s: %s -> %s by %s",
            target.id, type(previous).__name__, type(assignment).__name__, caller.id,
        )
        # Per-role user counts changed
        self.cache.invalidate()
        return principal_to_dict(target)

    @service_action
    def update_status(
        self,
        caller,
        user_id: Union[str, UUID],
        new_status: Union[str, UserStatus],
    ) -> Dict[str, Any]:
        """Activate, block or mark a user pending."""
        require_caller(caller)

        try:
            new_status = UserStatus(new_status)
        except ValueError:
            raise RoleValidationError(f"Invalid status: {new_status}") from None

        target = self._get_user(user_id)

        if target.id == caller.id:
            raise ForbiddenError("You cannot modify your own status")

        if is_super_admin(target) and new_status == UserStatus.BLOCKED:
            raise ForbiddenError("Cannot block super admin users")

        target.status = new_status.value
        target.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(target)

        logger.info("Status changed for %s to %s by %s", target.id, new_status.value, caller.id)
        return principal_to_dict(target)

    def _get_user(self, user_id: Union[str, UUID]) -> User:
        user = self.db.query(User).filter(User.id == as_uuid(user_id, USER_NOT_FOUND)).first()
        if not user:
            raise NotFoundError(USER_NOT_FOUND)
        return user
