"""Tests for role assignment variants."""

import uuid
from types import SimpleNamespace

import pytest

from backoffice.core.rbac.assignment import (
    CustomOverride,
    PlainUser,
    RoleAssigned,
    SuperAdmin,
    apply_assignment,
    assignment_for,
    parse_assignment,
)


def blank_principal():
    return SimpleNamespace(role_type="user", role_id=None, custom_permissions=None)


class TestParseAssignment:
    """Loose request fields must describe exactly one variant."""

    def test_super_admin(self):
        assert parse_assignment("super_admin") == SuperAdmin()

    def test_super_admin_rejects_role(self):
        with pytest.raises(ValueError, match="Super admins cannot have a role"):
            parse_assignment("super_admin", role_id=str(uuid.uuid4()))

    def test_super_admin_rejects_override(self):
        with pytest.raises(ValueError, match="Super admins cannot have a role"):
            parse_assignment("super_admin", custom_permissions={"pages": {"view": True}})

    def test_custom_role(self):
        role_id = uuid.uuid4()
        assert parse_assignment("custom_role", role_id=str(role_id)) == RoleAssigned(role_id)

    def test_custom_role_requires_role_id(self):
        with pytest.raises(ValueError, match="Custom role requires a role_id"):
            parse_assignment("custom_role")

    def test_custom_role_rejects_override(self):
        """A role and an override at once is the ambiguous state we refuse to store."""
        with pytest.raises(ValueError, match="cannot also have custom permissions"):
            parse_assignment(
                "custom_role",
                role_id=str(uuid.uuid4()),
                custom_permissions={"pages": {"view": True}},
            )

    def test_custom_role_invalid_id(self):
        with pytest.raises(ValueError, match="Invalid role ID"):
            parse_assignment("custom_role", role_id="not-a-uuid")

    def test_user_with_override(self):
        result = parse_assignment("user", custom_permissions={"pages": {"view": True}})
        assert result == CustomOverride({"pages": {"view": True}})

    def test_user_override_is_validated(self):
        with pytest.raises(ValueError, match="Unknown permission module"):
            parse_assignment("user", custom_permissions={"nope": {"view": True}})

    def test_plain_user(self):
        assert parse_assignment("user") == PlainUser()

    def test_user_rejects_role(self):
        with pytest.raises(ValueError, match="Only custom_role users"):
            parse_assignment("user", role_id=str(uuid.uuid4()))

    def test_unknown_role_type(self):
        with pytest.raises(ValueError, match="Unknown role type: owner"):
            parse_assignment("owner")


class TestApplyAssignment:

    def test_role_clears_override(self):
        p = blank_principal()
        p.custom_permissions = {"pages": {"view": True}}
        role_id = uuid.uuid4()
        apply_assignment(p, RoleAssigned(role_id))
        assert (p.role_type, p.role_id, p.custom_permissions) == ("custom_role", role_id, None)

    def test_override_clears_role(self):
        p = blank_principal()
        p.role_type, p.role_id = "custom_role", uuid.uuid4()
        apply_assignment(p, CustomOverride({"users": {"view": True}}))
        assert p.role_type == "user"
        assert p.role_id is None
        assert p.custom_permissions == {"users": {"view": True}}

    def test_super_admin_clears_everything(self):
        p = blank_principal()
        p.role_id = uuid.uuid4()
        p.custom_permissions = {"pages": {"view": True}}
        apply_assignment(p, SuperAdmin())
        assert (p.role_type, p.role_id, p.custom_permissions) == ("super_admin", None, None)

    def test_override_is_copied(self):
        matrix = {"pages": {"view": True}}
        assignment = CustomOverride(matrix)
        p = blank_principal()
        apply_assignment(p, assignment)
        matrix["pages"]["delete"] = True
        p.custom_permissions["pages"]["update"] = True
        assert assignment.permissions == {"pages": {"view": True}}


class TestAssignmentFor:

    def test_reads_each_variant(self):
        role_id = uuid.uuid4()
        assert assignment_for(SimpleNamespace(role_type="super_admin")) == SuperAdmin()
        assert assignment_for(
            SimpleNamespace(role_type="custom_role", role_id=role_id, custom_permissions=None)
        ) == RoleAssigned(role_id)
        assert assignment_for(
            SimpleNamespace(role_type="user", role_id=None, custom_permissions={})
        ) == CustomOverride({})
        assert assignment_for(blank_principal()) == PlainUser()

    def test_inconsistent_row_prefers_role(self):
        role_id = uuid.uuid4()
        p = SimpleNamespace(
            role_type="custom_role", role_id=role_id,
            custom_permissions={"pages": {"view": True}},
        )
        assert assignment_for(p) == RoleAssigned(role_id)
