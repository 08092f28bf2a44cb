from __future__ import annotations

from typing import Sequence

from .enums import ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind: ErrorKind = ErrorKind.VALIDATION


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = ErrorKind.VALIDATION


class NotFoundError(DomainError):
    """Raised when a referenced worker or record does not exist."""

    kind = ErrorKind.NOT_FOUND


class DuplicateIdError(DomainError):
    """Raised when a worker id is already taken."""

    kind = ErrorKind.DUPLICATE_ID


class StoreUnavailableError(DomainError):
    """Raised when the record store is unreachable or misconfigured."""

    kind = ErrorKind.STORE_UNAVAILABLE


class PartialCascadeFailure(DomainError):
    """Raised when a cascade step fails after earlier steps were committed."""

    kind = ErrorKind.PARTIAL_CASCADE

    def __init__(self, cascade: str, failed_step: str, committed: Sequence[str], cause: BaseException):
        self.cascade = cascade
        self.failed_step = failed_step
        self.committed = tuple(committed)
        self.cause = cause
        done = ", ".join(self.committed) if self.committed else "none"
        super().__init__(f"{cascade} stopped at '{failed_step}' (completed: {done}): {cause}")


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    kind = ErrorKind.UNAUTHENTICATED
