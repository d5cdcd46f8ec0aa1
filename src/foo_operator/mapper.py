"""Mapping of linked pod events to the Foos that reference them."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from . import metrics
from .constants import KIND_POD, OWNER_LOOKUP_INDEX, OWNER_LOOKUP_SCAN
from .errors import StoreError
from .logging import log_owner_event
from .models import ObjectKey, ReconcileContext, ReconcileRequest
from .services.store.base import ResourceStore
from .utils.errors import sanitize_exception


def relationship_key(owner: dict[str, Any]) -> str | None:
    """Return the pod name a Foo is linked to, if any."""
    return (owner.get("spec") or {}).get("name") or None


def relationship_index_entry(
    namespace: str | None, name: str, spec: Mapping[str, Any]
) -> dict[str, tuple[str, str]]:
    """Build the relationship index entry for one Foo.

    Args:
        namespace: Foo namespace
        name: Foo name
        spec: Foo spec

    Returns:
        ``{relationship key: (namespace, name)}``, or an empty dict when the
        Foo has no relationship key
    """
    key = spec.get("name")
    if not key:
        return {}
    return {key: (namespace or "default", name)}


class EventMapper:
    """Finds the Foos affected by a change to a linked pod."""

    def __init__(self, store: ResourceStore) -> None:
        self.store = store

    def map_event(
        self, linked: Mapping[str, Any], ctx: ReconcileContext
    ) -> list[ReconcileRequest]:
        """Map a linked pod to reconcile requests by listing every Foo.

        Listing failures are logged and counted; the event is dropped and an
        empty list is returned.

        Args:
            linked: Pod object that changed
            ctx: Context for the list call

        Returns:
            One request per Foo whose ``spec.name`` equals the pod name, in
            listing order
        """
        pod_name = _linked_name(linked)
        try:
            owners = self.store.list_foos(ctx)
        except StoreError as e:
            metrics.linked_events_total.labels(lookup=OWNER_LOOKUP_SCAN, result="error").inc()
            log_owner_event(
                ctx.logger, KIND_POD, _linked_namespace(linked), pod_name,
                event="error", reason="ListFailed",
                message=f"Unable to list Foo resources: {sanitize_exception(e)}",
                level=logging.ERROR,
                correlation_id=ctx.correlation_id,
            )
            return []

        requests = [
            ReconcileRequest(ObjectKey.from_meta(owner.get("metadata", {})))
            for owner in owners
            if relationship_key(owner) == pod_name
        ]
        self._record(ctx, linked, OWNER_LOOKUP_SCAN, requests)
        return requests

    def map_event_from_index(
        self,
        linked: Mapping[str, Any],
        index: Mapping[str, Iterable[tuple[str, str]]],
        ctx: ReconcileContext,
    ) -> list[ReconcileRequest]:
        """Map a linked pod to reconcile requests using the relationship index.

        Args:
            linked: Pod object that changed
            index: Relationship key to ``(namespace, name)`` owner identities
            ctx: Context used for logging

        Returns:
            One request per indexed Foo, sorted by namespace and name
        """
        pod_name = _linked_name(linked)
        owners = sorted(set(index.get(pod_name, ())))
        requests = [ReconcileRequest(ObjectKey(namespace, name)) for namespace, name in owners]
        self._record(ctx, linked, OWNER_LOOKUP_INDEX, requests)
        return requests

    def _record(
        self,
        ctx: ReconcileContext,
        linked: Mapping[str, Any],
        lookup: str,
        requests: list[ReconcileRequest],
    ) -> None:
        result = "matched" if requests else "unmatched"
        metrics.linked_events_total.labels(lookup=lookup, result=result).inc()
        for request in requests:
            log_owner_event(
                ctx.logger, KIND_POD, _linked_namespace(linked), _linked_name(linked),
                event="linked", reason="LinkedPodEvent",
                message="Pod linked to a Foo issued an event",
                owner=str(request.key),
                correlation_id=ctx.correlation_id,
            )


def _linked_name(linked: Mapping[str, Any]) -> str:
    return (linked.get("metadata") or {}).get("name", "")


def _linked_namespace(linked: Mapping[str, Any]) -> str:
    return (linked.get("metadata") or {}).get("namespace", "")
