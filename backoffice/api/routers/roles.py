"""Role management API endpoints.

Responses use the ``{success, data}`` / ``{success, error, code}`` envelope;
the HTTP status mirrors the failure code.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from backoffice.api.deps import get_current_user, get_db, get_role_cache
from backoffice.api.schemas.common import envelope
from backoffice.api.schemas.roles import ModuleActionInfo, PermissionCatalog, RoleCloneRequest
from backoffice.core.rbac import Action, Module, require_access
from backoffice.core.rbac.permissions import get_all_permissions
from backoffice.core.rbac.roles import PERMISSION_PRESETS, get_preset
from backoffice.core.roles import RoleListingCache, RoleService
from backoffice.db.models import User

router = APIRouter(prefix="/roles", tags=["roles"])


def get_role_service(
    db: Session = Depends(get_db),
    cache: RoleListingCache = Depends(get_role_cache),
) -> RoleService:
    return RoleService(db, cache)


@router.get("")
async def list_roles(
    service: RoleService = Depends(get_role_service),
    current_user: User = Depends(require_access("roles.view", "users.manage_roles")),
):
    """
    List all roles, system roles first.

    Also open to user managers, who pick from this list when assigning roles.
    """
    return envelope(service.list_roles(current_user))


@router.get("/counts")
async def list_roles_with_user_counts(
    service: RoleService = Depends(get_role_service),
    current_user: User = Depends(require_access("roles.view")),
):
    """List all roles with the number of users assigned to each."""
    return envelope(service.list_roles_with_user_counts(current_user))


@router.get("/permissions", response_model=PermissionCatalog)
async def list_all_permissions(
    current_user: User = Depends(get_current_user),
):
    """List every module, action and preset the role editor offers."""
    permissions = get_all_permissions()
    return PermissionCatalog(
        modules=[m.value for m in Module],
        actions=[a.value for a in Action],
        permissions=[
            ModuleActionInfo(
                permission=p,
                module=p.split(".")[0],
                action=p.split(".")[1],
            )
            for p in permissions
        ],
        presets={name: get_preset(name) for name in PERMISSION_PRESETS},
    )


@router.get("/{role_id}")
async def get_role(
    role_id: str,
    service: RoleService = Depends(get_role_service),
    current_user: User = Depends(require_access("roles.view")),
):
    """Get a specific role by ID."""
    return envelope(service.get_role(current_user, role_id))


@router.get("/{role_id}/user-count")
async def get_role_user_count(
    role_id: str,
    service: RoleService = Depends(get_role_service),
    current_user: User = Depends(require_access("roles.view")),
):
    """Number of users assigned to a role."""
    return envelope(service.get_user_count(current_user, role_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_role(
    payload: Dict[str, Any] = Body(...),
    service: RoleService = Depends(get_role_service),
    current_user: User = Depends(require_access("roles.create")),
):
    """Create a new custom role."""
    return envelope(service.create(current_user, payload), status.HTTP_201_CREATED)


@router.put("/{role_id}")
async def update_role(
    role_id: str,
    payload: Dict[str, Any] = Body(...),
    service: RoleService = Depends(get_role_service),
    current_user: User = Depends(require_access("roles.update")),
):
    """Update a role. System roles cannot be modified."""
    return envelope(service.update(current_user, role_id, payload))


@router.delete("/{role_id}")
async def delete_role(
    role_id: str,
    service: RoleService = Depends(get_role_service),
    current_user: User = Depends(require_access("roles.delete")),
):
    """Delete a role. System roles and roles still assigned to users cannot be deleted."""
    return envelope(service.delete(current_user, role_id))


@router.post("/{role_id}/clone", status_code=status.HTTP_201_CREATED)
async def clone_role(
    role_id: str,
    payload: RoleCloneRequest,
    service: RoleService = Depends(get_role_service),
    current_user: User = Depends(require_access("roles.create")),
):
    """Create a new role with a copy of another role's permissions."""
    result = service.clone(current_user, role_id, payload.name, payload.description)
    return envelope(result, status.HTTP_201_CREATED)
