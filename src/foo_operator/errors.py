"""Error taxonomy shared by the store adapter, reconciler and handlers."""

from __future__ import annotations


class OperatorError(Exception):
    """Base class for all operator errors."""


class StoreError(OperatorError):
    """A Kubernetes API call failed."""

    def __init__(self, message: str, status: int | None = None, reason: str | None = None):
        super().__init__(message)
        self.status = status
        self.reason = reason


class NotFoundError(StoreError):
    """The requested object does not exist."""


class TransientStoreError(StoreError):
    """Network failure, throttling or server error. Safe to retry."""


class ConflictError(TransientStoreError):
    """Optimistic-concurrency failure or concurrent create."""


class ValidationError(StoreError):
    """The request or configuration is invalid. Retrying will not help."""


class ReconcileCancelled(OperatorError):
    """The reconciliation pass ran past its deadline or was cancelled."""
