"""Endpoints describing the current user's own access.

The UI uses these to build navigation and to decide whether to render a
screen or an access-denied state.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from backoffice.api.deps import get_current_user
from backoffice.api.schemas.roles import AccessDecisionResponse, PermissionSummaryResponse
from backoffice.core.principals import permission_summary
from backoffice.core.rbac import Action, Module, check
from backoffice.db.models import User

router = APIRouter(prefix="/me", tags=["me"])


@router.get("/permissions", response_model=PermissionSummaryResponse)
async def my_permissions(current_user: User = Depends(get_current_user)):
    """Modules the current user can view and every permission they hold."""
    return permission_summary(current_user)


@router.get("/access", response_model=AccessDecisionResponse)
async def my_access(
    module: str = Query(..., description="Module name, e.g. pages"),
    action: str = Query(..., description="Action name, e.g. update"),
    current_user: User = Depends(get_current_user),
):
    """Run the access gate for the current user."""
    try:
        module_enum = Module(module)
        action_enum = Action(action)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown permission: {module}.{action}",
        )

    decision = check(current_user, module_enum, action_enum)
    return AccessDecisionResponse(
        module=module_enum.value,
        action=action_enum.value,
        allowed=decision.allowed,
        reason=decision.reason,
    )
