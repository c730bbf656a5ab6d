"""Tests for the permission matrix model."""

import pytest

from backoffice.core.rbac.permissions import (
    ALL_MODULES,
    MODULE_ACTIONS,
    Action,
    Module,
    Permission,
    build_matrix,
    copy_matrix,
    full_matrix,
    get,
    get_all_permissions,
    get_permissions_for_module,
    granted_permissions,
    list_viewable_modules,
    normalize_matrix,
)


class TestPermissionModel:
    """Test permission definitions."""

    def test_permission_string_format(self):
        perm = Permission(Module.PAGES, Action.VIEW)
        assert str(perm) == "pages.view"

    def test_permission_from_string(self):
        perm = Permission.from_string("media_library.manage_folders")
        assert perm.module == Module.MEDIA_LIBRARY
        assert perm.action == Action.MANAGE_FOLDERS

    def test_invalid_permission_format(self):
        with pytest.raises(ValueError):
            Permission.from_string("invalid")

        with pytest.raises(ValueError):
            Permission.from_string("too.many.parts")

        with pytest.raises(ValueError):
            Permission.from_string("pages.fly")

    def test_closed_action_vocabulary(self):
        assert {a.value for a in Action} == {
            "view", "create", "update", "delete", "manage",
            "upload", "respond", "assign", "manage_folders", "manage_roles",
        }

    def test_every_module_has_actions(self):
        assert set(MODULE_ACTIONS) == set(ALL_MODULES)
        for module, actions in MODULE_ACTIONS.items():
            assert Action.VIEW in actions, module

    def test_permissions_for_module(self):
        media = get_permissions_for_module(Module.MEDIA_LIBRARY)
        assert "media_library.upload" in media
        assert "media_library.manage_folders" in media
        assert "pages.view" not in media

    def test_all_permissions_generated(self):
        all_perms = get_all_permissions()
        assert "users.manage_roles" in all_perms
        assert "contact_submissions.respond" in all_perms
        assert len(all_perms) == len(set(all_perms))


class TestMatrixLookup:
    """Test get() and list_viewable_modules()."""

    def test_get_granted(self):
        matrix = {"pages": {"view": True, "create": True}}
        assert get(matrix, Module.PAGES, Action.VIEW)
        assert get(matrix, "pages", "create")

    def test_missing_entries_are_false(self):
        matrix = {"pages": {"view": True}}
        assert not get(matrix, Module.PAGES, Action.DELETE)
        assert not get(matrix, Module.USERS, Action.VIEW)

    def test_no_implied_permissions(self):
        matrix = {"pages": {"create": True, "manage": True}}
        assert not get(matrix, Module.PAGES, Action.VIEW)
        assert not get(matrix, Module.PAGES, Action.UPDATE)

    @pytest.mark.parametrize("matrix", [
        None,
        [],
        "pages",
        {"pages": None},
        {"pages": ["view"]},
        {"pages": {"view": "true"}},
        {"pages": {"view": 1}},
    ])
    def test_malformed_matrix_is_no_permission(self, matrix):
        assert get(matrix, Module.PAGES, Action.VIEW) is False

    def test_list_viewable_modules(self):
        matrix = {
            "pages": {"view": True, "create": True},
            "users": {"create": True},
            "roles": {"view": False},
            "media_library": {"view": True},
            "not_a_module": {"view": True},
        }
        assert list_viewable_modules(matrix) == {Module.PAGES, Module.MEDIA_LIBRARY}

    def test_list_viewable_modules_empty(self):
        assert list_viewable_modules(None) == set()
        assert list_viewable_modules({}) == set()


class TestMatrixHelpers:

    def test_normalize_keeps_known_entries(self):
        raw = {"pages": {"view": True, "delete": False}, "roles": {}}
        assert normalize_matrix(raw) == {"pages": {"view": True, "delete": False}}

    def test_normalize_accepts_enums(self):
        raw = {Module.PAGES: {Action.VIEW: True}}
        assert normalize_matrix(raw) == {"pages": {"view": True}}

    def test_normalize_none(self):
        assert normalize_matrix(None) == {}

    @pytest.mark.parametrize("raw, message", [
        ("pages", "mapping of modules"),
        ({"pagez": {"view": True}}, "Unknown permission module"),
        ({"pages": {"fly": True}}, "Unknown permission action"),
        ({"pages": {"view": "yes"}}, "must be true or false"),
        ({"pages": ["view"]}, "mapping of actions"),
    ])
    def test_normalize_rejects_malformed(self, raw, message):
        with pytest.raises(ValueError, match=message):
            normalize_matrix(raw)

    def test_copy_is_independent(self):
        original = {"pages": {"view": True}}
        copied = copy_matrix(original)
        copied["pages"]["delete"] = True
        assert original == {"pages": {"view": True}}

    def test_full_matrix_covers_every_module(self):
        matrix = full_matrix()
        assert list_viewable_modules(matrix) == set(ALL_MODULES)
        assert get(matrix, Module.USERS, Action.MANAGE_ROLES)

    def test_build_matrix(self):
        matrix = build_matrix((Module.PAGES, Action.VIEW), (Module.PAGES, Action.CREATE))
        assert matrix == {"pages": {"view": True, "create": True}}

    def test_granted_permissions(self):
        matrix = {"pages": {"view": True, "delete": False}, "roles": {"create": True}}
        assert granted_permissions(matrix) == ["pages.view", "roles.create"]
        assert granted_permissions(None) == []
