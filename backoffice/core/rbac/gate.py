"""Access gate for the back office.

Every protected operation and every protected screen goes through
``check``. The same decision, with the same precondition order, drives
both server-side guards and UI visibility.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from .permissions import Action, Module, Permission
from .resolver import _UNSET, has_permission, is_super_admin, load_role


NOT_AUTHENTICATED = "not authenticated"
ACCOUNT_NOT_ACTIVE = "account not active"


@dataclass(frozen=True)
class Decision:
    """Outcome of an access check."""
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed

    def to_dict(self) -> dict:
        data = {"allowed": self.allowed}
        if self.reason is not None:
            data["reason"] = self.reason
        return data


ALLOWED = Decision(True)


def denied(reason: str) -> Decision:
    return Decision(False, reason)


def _name(value) -> str:
    return getattr(value, "value", value)


def _status(principal) -> Optional[str]:
    value = getattr(principal, "status", None)
    return getattr(value, "value", value)


def check(principal, module: Module, action: Action, role=_UNSET) -> Decision:
    """
    Decide whether a principal may perform ``action`` on ``module``.

    Preconditions are evaluated in order and the first failing one wins:
    inactive accounts are denied, super admins are allowed, everyone else
    is resolved against their authoritative permission matrix.
    """
    if principal is None:
        return denied(NOT_AUTHENTICATED)

    if _status(principal) != "active":
        return denied(ACCOUNT_NOT_ACTIVE)

    if is_super_admin(principal):
        return ALLOWED

    if has_permission(principal, module, action, role):
        return ALLOWED

    return denied(f"missing permission `{_name(module)}.{_name(action)}`")


def check_any(principal, permissions: Iterable[Tuple[Module, Action]], role=_UNSET) -> Decision:
    """Allowed if any of the (module, action) pairs is allowed. Otherwise the first denial."""
    first = None
    for module, action in permissions:
        decision = check(principal, module, action, role)
        if decision.allowed:
            return decision
        if first is None:
            first = decision
    return first if first is not None else denied("no permissions requested")


def check_all(principal, permissions: Iterable[Tuple[Module, Action]], role=_UNSET) -> Decision:
    """Allowed only if every (module, action) pair is allowed."""
    for module, action in permissions:
        decision = check(principal, module, action, role)
        if not decision.allowed:
            return decision
    return ALLOWED


class AccessGate:
    """
    Gate bound to a single principal.

    Usage:
        gate = AccessGate(current_user)
        if not gate.can(Module.PAGES, Action.UPDATE):
            ...
    """

    def __init__(self, principal, role=_UNSET):
        self.principal = principal
        self.role = role

    def check(self, module: Module, action: Action) -> Decision:
        return check(self.principal, module, action, self.role)

    def can(self, module: Module, action: Action) -> bool:
        return self.check(module, action).allowed

    def require(self, module: Module, action: Action) -> None:
        """Raise HTTP 401/403 unless the check passes."""
        self.enforce(self.check(module, action))

    def require_any(self, permissions: Iterable[Tuple[Module, Action]]) -> None:
        self.enforce(check_any(self.principal, permissions, self.role))

    def require_all(self, permissions: Iterable[Tuple[Module, Action]]) -> None:
        self.enforce(check_all(self.principal, permissions, self.role))

    @staticmethod
    def enforce(decision: Decision) -> None:
        if decision.allowed:
            return
        if decision.reason == NOT_AUTHENTICATED:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
            )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=decision.reason)


def require_access(*permissions: Union[str, Permission], require_all: bool = False):
    """
    FastAPI dependency factory guarding an endpoint.

    The principal's role is loaded with the request's session, so a role
    edited by another request is seen immediately.

    Args:
        permissions: One or more "module.action" strings or Permission objects
        require_all: If True, every permission is needed. Default: any one.

    Usage:
        @router.post("/roles")
        async def create_role(
            current_user: User = Depends(require_access("roles.create")),
        ):
            ...
    """
    from backoffice.api.deps import get_current_user, get_db

    if not permissions:
        raise ValueError("require_access needs at least one permission")
    required = [
        p if isinstance(p, Permission) else Permission.from_string(p)
        for p in permissions
    ]

    def dependency(current_user=Depends(get_current_user), db: Session = Depends(get_db)):
        gate = AccessGate(current_user, role=load_role(db, current_user))
        if require_all:
            gate.require_all(required)
        else:
            gate.require_any(required)
        return current_user

    return dependency
