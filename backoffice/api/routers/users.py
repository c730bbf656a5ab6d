"""User role assignment endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backoffice.api.deps import get_db, get_role_cache
from backoffice.api.schemas.common import envelope
from backoffice.api.schemas.roles import RoleAssignmentRequest, StatusUpdateRequest
from backoffice.core.principals import PrincipalService
from backoffice.core.rbac import require_access
from backoffice.core.roles import RoleListingCache
from backoffice.db.models import User

router = APIRouter(prefix="/users", tags=["users"])


def get_principal_service(
    db: Session = Depends(get_db),
    cache: RoleListingCache = Depends(get_role_cache),
) -> PrincipalService:
    return PrincipalService(db, cache)


@router.put("/{user_id}/role")
async def update_user_role(
    user_id: str,
    payload: RoleAssignmentRequest,
    service: PrincipalService = Depends(get_principal_service),
    current_user: User = Depends(require_access("users.manage_roles")),
):
    """Assign a role, a custom permission override, or super admin to a user."""
    return envelope(service.assign_role(current_user, user_id, payload.model_dump()))


@router.put("/{user_id}/status")
async def update_user_status(
    user_id: str,
    payload: StatusUpdateRequest,
    service: PrincipalService = Depends(get_principal_service),
    current_user: User = Depends(require_access("users.update")),
):
    """Activate, block or mark a user pending."""
    return envelope(service.update_status(current_user, user_id, payload.status))
