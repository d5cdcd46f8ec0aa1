"""Reconciliation of a Foo against its managed Deployment."""

from __future__ import annotations

import copy
import logging
from typing import Any

from . import metrics
from .builders.deployment import build_deployment, derive_workload_identity
from .config import OperatorConfig
from .constants import KIND_DEPLOYMENT, KIND_FOO, KUBERNETES_DEFAULT_REPLICAS
from .errors import NotFoundError, StoreError
from .logging import log_owner_event
from .models import ObjectKey, ReconcileContext, ReconcileRequest, ReconcileResult
from .services.store.base import ResourceStore
from .utils.errors import sanitize_exception
from .utils.selectors import label_selector_to_string


def workload_replicas(workload: dict[str, Any]) -> int:
    """Return the Deployment's declared replica count, applying the API default."""
    replicas = workload.get("spec", {}).get("replicas")
    return KUBERNETES_DEFAULT_REPLICAS if replicas is None else int(replicas)


class FooReconciler:
    """Drives the Deployment of a Foo toward its spec and reports it in status.

    One call to :meth:`reconcile` is one pass. The pass never loops or
    retries; store errors other than the swallowed replica correction
    propagate to the caller, which decides when to run the next pass.
    """

    def __init__(self, store: ResourceStore, config: OperatorConfig) -> None:
        self.store = store
        self.config = config

    def reconcile(self, request: ReconcileRequest, ctx: ReconcileContext) -> ReconcileResult:
        """Run one reconciliation pass for a Foo.

        Args:
            request: Identity of the Foo to reconcile
            ctx: Per-pass context

        Returns:
            ReconcileResult describing the writes made

        Raises:
            StoreError: If a read, the create or the status update fails
            ReconcileCancelled: If the context expires mid-pass
        """
        key = request.key
        try:
            owner = self.store.get_foo(key, ctx)
        except NotFoundError:
            log_owner_event(
                ctx.logger, KIND_FOO, key.namespace, key.name,
                event="skipped", reason="NotFound",
                message="Foo no longer exists, nothing to reconcile",
                correlation_id=ctx.correlation_id,
            )
            return ReconcileResult()

        identity = derive_workload_identity(key, self.config)
        desired = build_deployment(owner, identity, self.config)
        workload, created = self.ensure_workload(identity, desired, ctx)

        observed, status_updated = self.sync_status(owner, workload, ctx)
        corrected = self.sync_replicas(key, workload, observed, ctx)

        return ReconcileResult(
            requeue=False,
            workload=identity,
            workload_created=created,
            status_updated=status_updated,
            observed_replicas=observed,
            replicas_corrected=corrected is not None,
            corrected_replicas=corrected,
        )

    def ensure_workload(
        self,
        identity: ObjectKey,
        desired: dict[str, Any],
        ctx: ReconcileContext,
    ) -> tuple[dict[str, Any], bool]:
        """Fetch the Deployment, creating it from ``desired`` when absent.

        An existing Deployment is returned unchanged; only the replica count
        is ever corrected, by :meth:`sync_replicas`.

        Returns:
            The Deployment as stored, and whether it was created in this call
        """
        try:
            return self.store.get_deployment(identity, ctx), False
        except NotFoundError:
            pass

        try:
            created = self.store.create_deployment(desired, ctx)
        except StoreError:
            metrics.workload_operations_total.labels(operation="create", result="error").inc()
            raise
        metrics.workload_operations_total.labels(operation="create", result="success").inc()
        log_owner_event(
            ctx.logger, KIND_DEPLOYMENT, identity.namespace, identity.name,
            event="created", reason="WorkloadCreated",
            message="Created managed Deployment",
            replicas=workload_replicas(created),
            correlation_id=ctx.correlation_id,
        )
        return created, True

    def sync_status(
        self,
        owner: dict[str, Any],
        workload: dict[str, Any],
        ctx: ReconcileContext,
    ) -> tuple[int, bool]:
        """Copy the Deployment's selector and replica count into the Foo status.

        The status is only written when it differs from what is stored.

        Returns:
            The observed Deployment replica count, and whether status was written
        """
        selector = label_selector_to_string(workload.get("spec", {}).get("selector"))
        replicas = workload_replicas(workload)

        status = owner.get("status") or {}
        if status.get("selector") == selector and status.get("replicas") == replicas:
            return replicas, False

        updated = copy.deepcopy(owner)
        updated["status"] = {**status, "selector": selector, "replicas": replicas}
        self.store.update_foo_status(updated, ctx)

        meta = owner.get("metadata", {})
        log_owner_event(
            ctx.logger, KIND_FOO, meta.get("namespace", ""), meta.get("name", ""),
            event="status_updated", reason="StatusUpdated",
            message="Updated Foo status from Deployment",
            uid=meta.get("uid", "unknown"),
            selector=selector,
            replicas=replicas,
            correlation_id=ctx.correlation_id,
        )
        return replicas, True

    def sync_replicas(
        self,
        key: ObjectKey,
        workload: dict[str, Any],
        observed: int,
        ctx: ReconcileContext,
    ) -> int | None:
        """Scale the Deployment to the Foo's latest ``spec.replicas``.

        The Foo is read again so edits made after the status write are seen.
        A failed Deployment update is logged and dropped; the next pass
        observes the same drift and tries again.

        Returns:
            The new replica count if the Deployment was scaled, else None
        """
        try:
            owner = self.store.get_foo(key, ctx)
        except NotFoundError:
            return None

        desired = owner.get("spec", {}).get("replicas")
        if desired is None or int(desired) == observed:
            return None

        desired = int(desired)
        metrics.drift_detected_total.labels(kind=KIND_FOO, resource_type="replicas").inc()
        log_owner_event(
            ctx.logger, KIND_FOO, key.namespace, key.name,
            event="drift", reason="ReplicaDrift",
            message=f"Foo wants {desired} replicas, Deployment has {observed}",
            correlation_id=ctx.correlation_id,
        )

        scaled = copy.deepcopy(workload)
        scaled.setdefault("spec", {})["replicas"] = desired
        try:
            self.store.update_deployment(scaled, ctx)
        except StoreError as e:
            metrics.workload_operations_total.labels(operation="scale", result="error").inc()
            metrics.error_total.labels(kind=KIND_FOO, error_type=type(e).__name__).inc()
            log_owner_event(
                ctx.logger, KIND_FOO, key.namespace, key.name,
                event="error", reason="ScaleFailed",
                message=f"Failed to scale Deployment: {sanitize_exception(e)}",
                level=logging.ERROR,
                correlation_id=ctx.correlation_id,
            )
            return None

        metrics.workload_operations_total.labels(operation="scale", result="success").inc()
        return desired
