"""Role lifecycle service.

Provides create/update/delete/clone operations on roles, enforcing:
- case-insensitive name uniqueness
- immutability of system roles
- no deletion while users are still assigned

Every public method returns an ``ActionResult`` and never raises.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backoffice.core.exceptions import (
    ConflictError,
    DependencyExistsError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from backoffice.core.rbac.permissions import copy_matrix
from backoffice.core.results import service_action
from backoffice.db.models import Role, User

from .cache import COUNTS_KEY, LISTING_KEY, NullRoleCache, RoleListingCache
from .validation import RoleCloneInput, RoleInput, parse

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "A role with this name already exists"
ROLE_NOT_FOUND = "Role not found"
SOURCE_NOT_FOUND = "Source role not found"
SYSTEM_ROLE_UPDATE = "Cannot modify system roles"
SYSTEM_ROLE_DELETE = "Cannot delete system roles"


def role_to_dict(role: Role) -> Dict[str, Any]:
    return {
        "id": str(role.id),
        "name": role.name,
        "description": role.description,
        "permissions": copy_matrix(role.permissions),
        "is_system_role": bool(role.is_system_role),
        "created_by": str(role.created_by) if role.created_by else None,
        "created_at": role.created_at.isoformat() if role.created_at else None,
        "updated_at": role.updated_at.isoformat() if role.updated_at else None,
    }


def require_caller(caller) -> None:
    """Raise UnauthorizedError unless there is an identified caller."""
    if caller is None or getattr(caller, "id", None) is None:
        raise UnauthorizedError()


def as_uuid(value: Union[str, UUID], message: str = ROLE_NOT_FOUND) -> UUID:
    """Coerce an id to UUID; anything unparseable cannot exist."""
    if isinstance(value, UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise NotFoundError(message) from None


class RoleService:
    """
    Manages the lifecycle of roles.

    Roles move NonExistent -> Active (create, clone) -> Active (update)
    -> Deleted (delete). System roles never leave Active.
    """

    def __init__(self, db: Session, cache: Optional[RoleListingCache] = None):
        """
        Args:
            db: Database session
            cache: Role listing cache, invalidated after every mutation
        """
        self.db = db
        self.cache = cache or NullRoleCache()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @service_action
    def list_roles(self, caller) -> List[Dict[str, Any]]:
        """All roles, system roles first, then by name."""
        require_caller(caller)

        generation = self.cache.generation()
        cached = self.cache.get(LISTING_KEY, generation)
        if cached is not None:
            return cached

        roles = (
            self.db.query(Role)
            .order_by(Role.is_system_role.desc(), Role.name.asc())
            .all()
        )
        listing = [role_to_dict(r) for r in roles]
        self.cache.set(listing, LISTING_KEY, generation)
        return listing

    @service_action
    def list_roles_with_user_counts(self, caller) -> List[Dict[str, Any]]:
        """All roles with the number of users assigned to each, in one query."""
        require_caller(caller)

        generation = self.cache.generation()
        cached = self.cache.get(COUNTS_KEY, generation)
        if cached is not None:
            return cached

        rows = (
            self.db.query(Role, func.count(User.id))
            .outerjoin(User, User.role_id == Role.id)
            .group_by(Role.id)
            .order_by(Role.is_system_role.desc(), Role.name.asc())
            .all()
        )
        listing = [{**role_to_dict(role), "user_count": count} for role, count in rows]
        self.cache.set(listing, COUNTS_KEY, generation)
        return listing

    @service_action
    def get_role(self, caller, role_id: Union[str, UUID]) -> Dict[str, Any]:
        require_caller(caller)
        return role_to_dict(self._get_role(role_id))

    @service_action
    def get_user_count(self, caller, role_id: Union[str, UUID]) -> int:
        """Number of users currently assigned to the role."""
        require_caller(caller)
        return self._count_users(as_uuid(role_id))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @service_action
    def create(self, caller, data: Union[RoleInput, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Create a new custom role.

        Returns:
            The created role
        """
        require_caller(caller)
        payload = parse(RoleInput, data)

        if self._name_taken(payload.name):
            raise ConflictError(DUPLICATE_NAME)

        role = Role(
            id=uuid.uuid4(),
            name=payload.name,
            description=payload.description,
            permissions=copy_matrix(payload.permissions),
            is_system_role=False,
            created_by=caller.id,
        )
        self.db.add(role)
        self._commit()
        self.db.refresh(role)

        logger.info("Role created: %s (%s) by %s", role.name, role.id, caller.id)
        self.cache.invalidate()
        return role_to_dict(role)

    @service_action
    def update(
        self,
        caller,
        role_id: Union[str, UUID],
        data: Union[RoleInput, Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Overwrite a custom role's name, description and permissions."""
        require_caller(caller)
        role = self._get_role(role_id)

        if role.is_system_role:
            raise ForbiddenError(SYSTEM_ROLE_UPDATE)

        payload = parse(RoleInput, data)

        if self._name_taken(payload.name, exclude_id=role.id):
            raise ConflictError(DUPLICATE_NAME)

        role.name = payload.name
        role.description = payload.description
        role.permissions = copy_matrix(payload.permissions)
        role.updated_at = datetime.utcnow()
        self._commit()
        self.db.refresh(role)

        logger.info("Role updated: %s (%s) by %s", role.name, role.id, caller.id)
        self.cache.invalidate()
        return role_to_dict(role)

    @service_action
    def delete(self, caller, role_id: Union[str, UUID]) -> None:
        """Delete a custom role that no user is assigned to."""
        require_caller(caller)
        role = self._get_role(role_id)

        if role.is_system_role:
            raise ForbiddenError(SYSTEM_ROLE_DELETE)

        count = self._count_users(role.id)
        if count > 0:
            raise DependencyExistsError(
                f"Cannot delete role. {count} user(s) are currently assigned to this role. "
                f"Please reassign them first.",
                count=count,
            )

        name = role.name
        self.db.delete(role)
        self.db.commit()

        logger.info("Role deleted: %s (%s) by %s", name, role_id, caller.id)
        self.cache.invalidate()
        return None

    @service_action
    def clone(
        self,
        caller,
        source_role_id: Union[str, UUID],
        name: str,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a new custom role with an independent copy of another role's permissions.

        System roles can be cloned; the clone is always a custom role.
        """
        require_caller(caller)

        source_id = as_uuid(source_role_id, SOURCE_NOT_FOUND)
        source = self.db.query(Role).filter(Role.id == source_id).first()
        if not source:
            raise NotFoundError(SOURCE_NOT_FOUND)

        payload = parse(RoleCloneInput, {"name": name, "description": description})

        if self._name_taken(payload.name):
            raise ConflictError(DUPLICATE_NAME)

        role = Role(
            id=uuid.uuid4(),
            name=payload.name,
            description=payload.description,
            permissions=copy_matrix(source.permissions),
            is_system_role=False,
            created_by=caller.id,
        )
        self.db.add(role)
        self._commit()
        self.db.refresh(role)

        logger.info("Role cloned: %s -> %s (%s) by %s", source.name, role.name, role.id, caller.id)
        self.cache.invalidate()
        return role_to_dict(role)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_role(self, role_id: Union[str, UUID]) -> Role:
        role = self.db.query(Role).filter(Role.id == as_uuid(role_id)).first()
        if not role:
            raise NotFoundError(ROLE_NOT_FOUND)
        return role

    def _name_taken(self, name: str, exclude_id: Optional[UUID] = None) -> bool:
        query = self.db.query(Role.id).filter(func.lower(Role.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(Role.id != exclude_id)
        return query.first() is not None

    def _count_users(self, role_id: UUID) -> int:
        return self.db.query(User).filter(User.role_id == role_id).count()

    def _commit(self) -> None:
        # The unique index on lower(name) settles concurrent creators
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(DUPLICATE_NAME) from None
