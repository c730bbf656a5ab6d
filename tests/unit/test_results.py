"""Tests for the service result envelope."""

from unittest.mock import MagicMock

from backoffice.core.exceptions import (
    ConflictError,
    DependencyExistsError,
    ForbiddenError,
    NotFoundError,
    RoleValidationError,
    UnauthorizedError,
)
from backoffice.core.results import ActionResult, service_action


class FakeService:
    def __init__(self):
        self.db = MagicMock()

    @service_action
    def run(self, exc=None, value=None):
        if exc is not None:
            raise exc
        return value


class TestActionResult:

    def test_ok(self):
        result = ActionResult.ok({"id": 1})
        assert result.status_code == 200
        assert result.to_response() == {"success": True, "data": {"id": 1}}

    def test_fail_defaults_to_store_error(self):
        result = ActionResult.fail("boom")
        assert result.code == "store_error"
        assert result.status_code == 500
        assert result.to_response() == {"success": False, "error": "boom", "code": "store_error"}


class TestServiceAction:
    """Exceptions never escape a service method."""

    def test_success(self):
        result = FakeService().run(value=[1, 2])
        assert result.success
        assert result.data == [1, 2]

    def test_taxonomy_codes(self):
        service = FakeService()
        cases = [
            (UnauthorizedError(), "unauthorized", 401),
            (RoleValidationError("bad"), "validation_error", 400),
            (NotFoundError("gone"), "not_found", 404),
            (ConflictError("taken"), "conflict", 409),
            (ForbiddenError("no"), "forbidden", 403),
            (DependencyExistsError("in use", count=2), "dependency_exists", 409),
        ]
        for exc, code, status_code in cases:
            result = service.run(exc=exc)
            assert not result.success
            assert result.code == code
            assert result.status_code == status_code
            assert result.error == exc.message
        service.db.rollback.assert_not_called()

    def test_unexpected_error_rolls_back(self):
        service = FakeService()
        result = service.run(exc=RuntimeError("kaput"))
        assert result.code == "store_error"
        assert result.error == "kaput"
        service.db.rollback.assert_called_once()
