"""Handler for pods linked to Foo resources."""

from __future__ import annotations

import threading
from typing import Any, Callable, Iterable, Mapping

import kopf

from .. import metrics
from ..config import OperatorConfig, get_config
from ..constants import ANNOTATION_LINKED_EVENT, KIND_POD, OWNER_LOOKUP_INDEX
from ..errors import NotFoundError, ReconcileCancelled, StoreError
from ..mapper import EventMapper
from ..models import ReconcileContext, ReconcileRequest
from ..services.kubernetes.client import get_kubernetes_store
from ..services.store.base import ResourceStore
from ..utils.errors import sanitize_exception
from .base import BaseHandler


def linked_event_marker(linked: Mapping[str, Any]) -> str:
    """Value recorded on a Foo to signal a change of its linked pod.

    Redelivery of the same pod revision yields the same marker, so the Foo
    is not touched twice for one change.
    """
    meta = linked.get("metadata") or {}
    return f"{meta.get('name', '')}@{meta.get('resourceVersion', '')}"


class PodEventHandler(BaseHandler):
    """Maps pod events to Foos and enqueues those Foos for reconciliation."""

    def __init__(
        self,
        config: OperatorConfig,
        store_factory: Callable[[], ResourceStore] = get_kubernetes_store,
    ):
        super().__init__(KIND_POD, config)
        self._store_factory = store_factory
        self._store: ResourceStore | None = None
        self._lock = threading.Lock()

    @property
    def store(self) -> ResourceStore:
        with self._lock:
            if self._store is None:
                self._store = self._store_factory()
            return self._store

    @property
    def mapper(self) -> EventMapper:
        return EventMapper(self.store)

    def handle(
        self,
        linked: Mapping[str, Any],
        index: Mapping[str, Iterable[tuple[str, str]]] | None = None,
    ) -> list[ReconcileRequest]:
        """Map a pod event to Foos and enqueue each of them.

        Args:
            linked: Pod body from the event
            index: Relationship index, used when the index lookup is configured

        Returns:
            The requests that were produced by the mapper
        """
        ctx = self.new_context()
        if self.config.owner_lookup == OWNER_LOOKUP_INDEX and index is not None:
            requests = self.mapper.map_event_from_index(linked, index, ctx)
        else:
            requests = self.mapper.map_event(linked, ctx)

        for request in requests:
            self.enqueue(request, linked, ctx)
        return requests

    def enqueue(
        self,
        request: ReconcileRequest,
        linked: Mapping[str, Any],
        ctx: ReconcileContext,
    ) -> bool:
        """Touch the Foo so kopf delivers an update for it.

        Failures are logged and the event is dropped; the next change of the
        pod or the periodic resync reconciles the Foo anyway.

        Returns:
            True if the Foo was marked
        """
        meta = {"name": request.key.name, "namespace": request.key.namespace}
        try:
            self.store.annotate_foo(
                request.key, {ANNOTATION_LINKED_EVENT: linked_event_marker(linked)}, ctx
            )
        except NotFoundError:
            return False
        except (StoreError, ReconcileCancelled) as e:
            metrics.error_total.labels(kind=self.kind, error_type=type(e).__name__).inc()
            self.log_warning(
                meta,
                f"Unable to enqueue Foo for linked pod event: {sanitize_exception(e)}",
                reason="EnqueueFailed",
            )
            return False
        self.log_info(
            meta,
            "Enqueued Foo for linked pod event",
            event="enqueued",
            reason="LinkedPodEvent",
            pod=linked_event_marker(linked),
        )
        return True


# Global handler instance
_handler = PodEventHandler(get_config())


@kopf.on.event("v1", "pods")
def on_pod_event(
    body: kopf.Body,
    foo_relationships: kopf.Index,
    **kwargs: Any,
) -> None:
    """Re-trigger reconciliation of Foos linked to a changed pod."""
    _handler.handle(body, foo_relationships)
