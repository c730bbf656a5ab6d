"""Input schemas for role management."""

import re
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from backoffice.core.exceptions import RoleValidationError
from backoffice.core.rbac.permissions import PermissionMatrix, normalize_matrix

ROLE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\s-]+$")

NAME_TOO_SHORT = "Role name must be at least 2 characters"
NAME_TOO_LONG = "Role name must not exceed 50 characters"
NAME_INVALID = "Role name can only contain letters, numbers, spaces, and hyphens"
DESCRIPTION_TOO_LONG = "Description must not exceed 500 characters"


def _check_name(value: str) -> str:
    if len(value) < 2:
        raise ValueError(NAME_TOO_SHORT)
    if len(value) > 50:
        raise ValueError(NAME_TOO_LONG)
    if not ROLE_NAME_PATTERN.match(value):
        raise ValueError(NAME_INVALID)
    return value


def _check_description(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > 500:
        raise ValueError(DESCRIPTION_TOO_LONG)
    return value


class RoleInput(BaseModel):
    """Payload for creating or updating a role."""
    name: str
    description: Optional[str] = None
    permissions: PermissionMatrix = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _check_name(value)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: Optional[str]) -> Optional[str]:
        return _check_description(value)

    @field_validator("permissions", mode="before")
    @classmethod
    def validate_permissions(cls, value: Any) -> PermissionMatrix:
        return normalize_matrix(value)


class RoleCloneInput(BaseModel):
    """Name and description for a cloned role."""
    name: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _check_name(value)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: Optional[str]) -> Optional[str]:
        return _check_description(value)


def first_error_message(exc: ValidationError) -> str:
    """Message of the first violation, without pydantic's prefix."""
    errors = exc.errors()
    if not errors:
        return "Validation failed"
    error = errors[0]
    message = error.get("msg") or "Validation failed"
    if error.get("type") == "value_error" and message.startswith("Value error, "):
        return message[len("Value error, "):]
    field = ".".join(str(p) for p in error.get("loc", ()))
    return f"{field}: {message}" if field else message


def parse(schema: type, data: Any):
    """Validate ``data`` against ``schema``, raising RoleValidationError on failure."""
    if isinstance(data, schema):
        data = data.model_dump()
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise RoleValidationError(first_error_message(e)) from e
