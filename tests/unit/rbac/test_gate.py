"""Tests for the access gate."""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from backoffice.core.rbac.gate import (
    ACCOUNT_NOT_ACTIVE,
    NOT_AUTHENTICATED,
    AccessGate,
    Decision,
    check,
    check_all,
    check_any,
    require_access,
)
from backoffice.core.rbac.permissions import Action, Module


def principal(role_type="user", status="active", role=None, custom_permissions=None):
    return SimpleNamespace(
        role_type=role_type,
        status=status,
        role=role,
        role_id=None,
        custom_permissions=custom_permissions,
    )


class TestCheck:

    def test_active_super_admin_allowed_everywhere(self):
        p = principal("super_admin")
        for module in Module:
            for action in Action:
                assert check(p, module, action) == Decision(True)

    @pytest.mark.parametrize("status", ["blocked", "pending"])
    @pytest.mark.parametrize("role_type", ["super_admin", "custom_role", "user"])
    def test_inactive_always_denied(self, status, role_type):
        p = principal(
            role_type,
            status=status,
            role=SimpleNamespace(permissions={"pages": {"view": True}}),
            custom_permissions={"pages": {"view": True}},
        )
        decision = check(p, Module.PAGES, Action.VIEW)
        assert not decision.allowed
        assert decision.reason == ACCOUNT_NOT_ACTIVE

    def test_plain_user_denied_everywhere(self):
        p = principal("user")
        for module in Module:
            for action in Action:
                assert not check(p, module, action).allowed

    def test_missing_permission_reason(self):
        p = principal("user", custom_permissions={"pages": {"view": True}})
        decision = check(p, Module.PAGES, Action.DELETE)
        assert not decision.allowed
        assert decision.reason == "missing permission `pages.delete`"

    def test_granted_permission(self):
        p = principal("user", custom_permissions={"pages": {"view": True}})
        assert check(p, Module.PAGES, Action.VIEW).allowed

    def test_no_principal(self):
        decision = check(None, Module.PAGES, Action.VIEW)
        assert decision == Decision(False, NOT_AUTHENTICATED)

    def test_status_enum_accepted(self):
        from backoffice.db.models import UserStatus

        p = principal("super_admin", status=UserStatus.ACTIVE)
        assert check(p, Module.ROLES, Action.DELETE).allowed

    def test_decision_is_truthy(self):
        assert Decision(True)
        assert not Decision(False, "nope")
        assert Decision(False, "nope").to_dict() == {"allowed": False, "reason": "nope"}
        assert Decision(True).to_dict() == {"allowed": True}


class TestCombinators:

    def test_check_any(self):
        p = principal("user", custom_permissions={"pages": {"update": True}})
        assert check_any(p, [(Module.PAGES, Action.DELETE), (Module.PAGES, Action.UPDATE)]).allowed
        assert not check_any(p, [(Module.USERS, Action.VIEW)]).allowed
        assert not check_any(p, []).allowed

    def test_check_any_reports_first_denial(self):
        p = principal("user")
        decision = check_any(p, [(Module.ROLES, Action.VIEW), (Module.USERS, Action.MANAGE_ROLES)])
        assert decision.reason == "missing permission `roles.view`"

    def test_check_all(self):
        p = principal("user", custom_permissions={"pages": {"view": True, "update": True}})
        assert check_all(p, [(Module.PAGES, Action.VIEW), (Module.PAGES, Action.UPDATE)]).allowed
        decision = check_all(p, [(Module.PAGES, Action.VIEW), (Module.PAGES, Action.DELETE)])
        assert decision.reason == "missing permission `pages.delete`"


class TestAccessGate:

    def test_can(self):
        gate = AccessGate(principal("user", custom_permissions={"roles": {"view": True}}))
        assert gate.can(Module.ROLES, Action.VIEW)
        assert not gate.can(Module.ROLES, Action.CREATE)

    def test_require_raises_403(self):
        gate = AccessGate(principal("user"))
        with pytest.raises(HTTPException) as exc:
            gate.require(Module.ROLES, Action.VIEW)
        assert exc.value.status_code == 403
        assert exc.value.detail == "missing permission `roles.view`"

    def test_require_inactive_raises_403(self):
        gate = AccessGate(principal("super_admin", status="blocked"))
        with pytest.raises(HTTPException) as exc:
            gate.require(Module.ROLES, Action.VIEW)
        assert exc.value.status_code == 403
        assert exc.value.detail == ACCOUNT_NOT_ACTIVE

    def test_require_without_principal_raises_401(self):
        with pytest.raises(HTTPException) as exc:
            AccessGate(None).require(Module.ROLES, Action.VIEW)
        assert exc.value.status_code == 401

    def test_require_passes(self):
        AccessGate(principal("super_admin")).require(Module.SETTINGS, Action.UPDATE)

    def test_require_any(self):
        gate = AccessGate(principal("user", custom_permissions={"users": {"manage_roles": True}}))
        gate.require_any([(Module.ROLES, Action.VIEW), (Module.USERS, Action.MANAGE_ROLES)])
        with pytest.raises(HTTPException) as exc:
            gate.require_any([(Module.ROLES, Action.VIEW), (Module.ROLES, Action.CREATE)])
        assert exc.value.detail == "missing permission `roles.view`"

    def test_require_all(self):
        gate = AccessGate(principal("user", custom_permissions={"roles": {"view": True}}))
        gate.require_all([(Module.ROLES, Action.VIEW)])
        with pytest.raises(HTTPException) as exc:
            gate.require_all([(Module.ROLES, Action.VIEW), (Module.ROLES, Action.DELETE)])
        assert exc.value.detail == "missing permission `roles.delete`"

    def test_explicit_role_wins_over_principal_attribute(self):
        stale = SimpleNamespace(permissions={"roles": {"view": True}})
        p = principal("custom_role", role=stale)
        gate = AccessGate(p, role=SimpleNamespace(permissions={}))
        assert not gate.can(Module.ROLES, Action.VIEW)


class TestRequireAccess:
    """Test the endpoint guard factory."""

    def test_needs_a_permission(self):
        with pytest.raises(ValueError, match="at least one permission"):
            require_access()

    def test_rejects_unknown_permission(self):
        with pytest.raises(ValueError):
            require_access("pages.fly")
        with pytest.raises(ValueError):
            require_access("pages")
