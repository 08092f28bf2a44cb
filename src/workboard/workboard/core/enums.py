from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories carried by results and mapped to HTTP statuses."""

    VALIDATION = "ValidationError"
    NOT_FOUND = "NotFound"
    DUPLICATE_ID = "DuplicateId"
    STORE_UNAVAILABLE = "StoreUnavailable"
    PARTIAL_CASCADE = "PartialCascadeFailure"
    UNAUTHENTICATED = "Unauthenticated"


class Collection(str, Enum):
    """Document collections kept in the record store."""

    WORKERS = "workers"
    WORKS = "works"
    PAYMENTS = "payments"
    ADMIN = "admin"


LEDGER_COLLECTIONS = (Collection.WORKERS, Collection.WORKS, Collection.PAYMENTS)
