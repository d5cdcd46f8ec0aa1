"""Handler for Foo resources."""

from __future__ import annotations

import threading
from typing import Any, Callable

import kopf

from ..config import OperatorConfig, get_config
from ..constants import API_GROUP_VERSION, KIND_FOO
from ..errors import ReconcileCancelled, StoreError, ValidationError
from ..mapper import relationship_index_entry
from ..models import ObjectKey, ReconcileRequest, ReconcileResult
from ..reconciler import FooReconciler
from ..services.kubernetes.client import get_kubernetes_store
from ..services.store.base import ResourceStore
from ..utils.errors import sanitize_exception
from ..utils.events import (
    emit_replicas_corrected,
    emit_status_updated,
    emit_workload_created,
)
from .base import BaseHandler


class FooHandler(BaseHandler):
    """Runs reconciliation passes for Foo resources on behalf of kopf."""

    def __init__(
        self,
        config: OperatorConfig,
        store_factory: Callable[[], ResourceStore] = get_kubernetes_store,
    ):
        super().__init__(KIND_FOO, config)
        self._store_factory = store_factory
        self._reconciler: FooReconciler | None = None
        self._lock = threading.Lock()

    @property
    def reconciler(self) -> FooReconciler:
        with self._lock:
            if self._reconciler is None:
                self._reconciler = FooReconciler(self._store_factory(), self.config)
            return self._reconciler

    def reconcile(self, body: dict[str, Any], stopped: Any = None) -> ReconcileResult:
        """Run one reconciliation pass and translate failures for kopf.

        Args:
            body: Foo object
            stopped: Optional stop flag; the pass is cancelled once it is set

        Raises:
            kopf.PermanentError: For invalid requests or configuration
            kopf.TemporaryError: For any other store failure or a timeout
        """
        meta = body.get("metadata", {})
        request = ReconcileRequest(ObjectKey.from_meta(meta))
        ctx = self.new_context(stopped)

        try:
            result = self.reconcile_with_metrics(
                body, lambda: self.reconciler.reconcile(request, ctx)
            )
        except ValidationError as e:
            raise kopf.PermanentError(sanitize_exception(e)) from e
        except (StoreError, ReconcileCancelled) as e:
            raise kopf.TemporaryError(
                sanitize_exception(e), delay=self.config.retry_delay_seconds
            ) from e

        self._emit_events(body, result)
        return result

    def _emit_events(self, body: dict[str, Any], result: ReconcileResult) -> None:
        workload = str(result.workload)
        if result.workload_created:
            emit_workload_created(body, workload)
        if result.status_updated and result.observed_replicas is not None:
            emit_status_updated(body, result.observed_replicas)
        if result.replicas_corrected and result.corrected_replicas is not None:
            emit_replicas_corrected(body, workload, result.corrected_replicas)


# Global handler instance
_config = get_config()
_handler = FooHandler(_config)


@kopf.index(API_GROUP_VERSION, KIND_FOO)
def foo_relationships(
    namespace: str | None,
    name: str,
    spec: dict[str, Any],
    **kwargs: Any,
) -> dict[str, tuple[str, str]]:
    """Index Foos by the name of the pod they are linked to."""
    return relationship_index_entry(namespace, name, spec)


@kopf.on.create(API_GROUP_VERSION, KIND_FOO)
@kopf.on.update(API_GROUP_VERSION, KIND_FOO)
@kopf.on.resume(API_GROUP_VERSION, KIND_FOO)
def reconcile_foo(body: kopf.Body, **kwargs: Any) -> None:
    """Reconcile a Foo when it is created, changed or seen at startup."""
    _handler.reconcile(dict(body))


@kopf.timer(API_GROUP_VERSION, KIND_FOO, interval=_config.resync_interval_seconds)
def resync_foo(body: kopf.Body, stopped: kopf.DaemonStopped, **kwargs: Any) -> None:
    """Periodically reconcile every Foo, giving up when the operator stops."""
    _handler.reconcile(dict(body), stopped=stopped)
