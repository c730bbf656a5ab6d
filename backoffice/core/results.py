"""Discriminated result type returned across the service boundary."""

import functools
import logging
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from .exceptions import STORE_ERROR, STATUS_CODES, AuthorizationEngineError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ActionResult(BaseModel, Generic[T]):
    """``{success: True, data}`` or ``{success: False, error, code}``."""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, code: str = STORE_ERROR) -> "ActionResult":
        return cls(success=False, error=error, code=code)

    @property
    def status_code(self) -> int:
        if self.success:
            return 200
        return STATUS_CODES.get(self.code, 500)

    def to_response(self) -> dict:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error, "code": self.code}


def service_action(func: Callable) -> Callable:
    """
    Decorator for service methods that must never raise.

    Expected failures become ``ActionResult.fail`` with their taxonomy
    code. Store and unexpected errors roll back the session and become a
    generic failure carrying the underlying message.
    """
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> ActionResult:
        try:
            return ActionResult.ok(func(self, *args, **kwargs))
        except AuthorizationEngineError as e:
            return ActionResult.fail(e.message, e.code)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Store error in %s", func.__qualname__)
            return ActionResult.fail(str(e.orig) if getattr(e, "orig", None) else str(e))
        except Exception as e:
            self.db.rollback()
            logger.exception("Unexpected error in %s", func.__qualname__)
            return ActionResult.fail(str(e) or "An unexpected error occurred")
    return wrapper
