from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .enums import ErrorKind
from .exceptions import DomainError, PartialCascadeFailure, StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Result:
    """Outcome of a mutating operation: callers show ``message`` verbatim."""

    success: bool
    message: str
    error: Optional[ErrorKind] = None
    data: Any = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "Result":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> "Result":
        return cls(success=False, message=message, error=error)

    def to_dict(self) -> dict:
        out: dict = {"success": self.success, "message": self.message}
        if self.error is not None:
            out["error"] = self.error.value
        return out


def returns_result(success_message: str, action: str) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Result]]]:
    """Turn a coroutine that raises domain errors into one returning a Result.

    Validation, not-found and duplicate errors keep their own message. Store
    and cascade failures are prefixed with ``Failed to <action>: ``.
    """

    def decorator(fn: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Result]]:
        @wraps(fn)
        async def wrapper(*args, **kwargs) -> Result:
            try:
                data = await fn(*args, **kwargs)
            except (StoreUnavailableError, PartialCascadeFailure) as e:
                logger.error("Failed to %s: %s", action, e)
                return Result.fail(e.kind, f"Failed to {action}: {e}")
            except DomainError as e:
                return Result.fail(e.kind, str(e))
            return Result.ok(success_message, data)

        return wrapper

    return decorator
