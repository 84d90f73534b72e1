"""Domain-level exceptions raised by the reconciliation engine and its ports."""

from __future__ import annotations


class ReconciliationError(RuntimeError):
    """Base class for reconciliation failures."""


class RecordValidationError(ReconciliationError, ValueError):
    """Raised when an input record is malformed."""


class PersistenceConflictError(ReconciliationError):
    """Raised by repositories when a unique constraint rejects a write."""


class StoreUnavailableError(ReconciliationError):
    """Raised when the backing store cannot be reached at job setup."""
