"""Exception taxonomy for the authorization engine.

Services raise these internally; the public service boundary converts them
into ``ActionResult`` failures so nothing escapes to callers as an exception.
"""

from fastapi import status


class AuthorizationEngineError(Exception):
    """Base exception for expected, recoverable failures."""

    code = "error"

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class UnauthorizedError(AuthorizationEngineError):
    """Raised when there is no authenticated caller."""
    code = "unauthorized"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class RoleValidationError(AuthorizationEngineError):
    """Raised when role or assignment input is malformed."""
    code = "validation_error"


class NotFoundError(AuthorizationEngineError):
    """Raised when a role or user does not exist."""
    code = "not_found"


class ConflictError(AuthorizationEngineError):
    """Raised when a role name is already taken (case-insensitive)."""
    code = "conflict"


class ForbiddenError(AuthorizationEngineError):
    """Raised when a mutation is never permitted, such as editing a system role."""
    code = "forbidden"


class DependencyExistsError(AuthorizationEngineError):
    """Raised when a role cannot be deleted because users are assigned to it."""
    code = "dependency_exists"

    def __init__(self, message: str, count: int):
        super().__init__(message)
        self.count = count


STORE_ERROR = "store_error"

# HTTP status for each failure code
STATUS_CODES = {
    UnauthorizedError.code: status.HTTP_401_UNAUTHORIZED,
    RoleValidationError.code: status.HTTP_400_BAD_REQUEST,
    NotFoundError.code: status.HTTP_404_NOT_FOUND,
    ConflictError.code: status.HTTP_409_CONFLICT,
    ForbiddenError.code: status.HTTP_403_FORBIDDEN,
    DependencyExistsError.code: status.HTTP_409_CONFLICT,
    STORE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}
