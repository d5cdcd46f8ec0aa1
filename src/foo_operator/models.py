"""Value types passed between the scheduler adapter and the core."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from .errors import ReconcileCancelled


class ObjectKey(NamedTuple):
    """Namespace and name identifying a namespaced object."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"

    @classmethod
    def from_meta(cls, meta: dict[str, Any]) -> ObjectKey:
        return cls(meta.get("namespace", "default"), meta.get("name", ""))


@dataclass(frozen=True)
class ReconcileRequest:
    """A request to reconcile one owner."""

    key: ObjectKey


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of a reconciliation pass.

    ``requeue`` is always False; the remaining fields describe which writes
    happened and what was observed.
    """

    requeue: bool = False
    workload: ObjectKey | None = None
    workload_created: bool = False
    status_updated: bool = False
    observed_replicas: int | None = None
    replicas_corrected: bool = False
    corrected_replicas: int | None = None


@dataclass
class ReconcileContext:
    """Explicit per-pass context handed to every operation and store call.

    ``stopped`` is an optional external stop signal such as the flag kopf
    hands to timers; it is truthy once the operator is shutting down.
    """

    logger: logging.Logger
    deadline: float | None = None
    request_timeout: float = 30.0
    correlation_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    stopped: Any = field(default=None, repr=False)
    _cancelled: threading.Event = field(default_factory=threading.Event, repr=False)

    @classmethod
    def with_timeout(
        cls,
        logger: logging.Logger,
        timeout: float | None,
        request_timeout: float = 30.0,
        stopped: Any = None,
    ) -> ReconcileContext:
        """Create a context whose deadline is ``timeout`` seconds from now."""
        deadline = time.monotonic() + timeout if timeout is not None else None
        return cls(
            logger=logger, deadline=deadline, request_timeout=request_timeout, stopped=stopped
        )

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set() or bool(self.stopped)

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when unbounded."""
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def check(self) -> None:
        """Raise ReconcileCancelled if the pass was cancelled or timed out."""
        if self.cancelled:
            raise ReconcileCancelled("reconciliation cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise ReconcileCancelled("reconciliation deadline exceeded")

    def timeout(self) -> float:
        """Timeout to use for the next API request."""
        self.check()
        remaining = self.remaining()
        if remaining is None:
            return self.request_timeout
        return min(self.request_timeout, remaining)
