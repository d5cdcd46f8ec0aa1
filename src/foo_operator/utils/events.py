"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_REPLICAS_CORRECTED,
    EVENT_REASON_STATUS_UPDATED,
    EVENT_REASON_WORKLOAD_CREATED,
)


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Resource body the event refers to
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_failed(body: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_workload_created(body: dict[str, Any], workload: str) -> None:
    """Emit workload created event."""
    emit_event(body, EVENT_REASON_WORKLOAD_CREATED, f"Deployment {workload} created")


def emit_status_updated(body: dict[str, Any], replicas: int) -> None:
    """Emit status updated event."""
    emit_event(body, EVENT_REASON_STATUS_UPDATED, f"Observed {replicas} workload replicas")


def emit_replicas_corrected(body: dict[str, Any], workload: str, replicas: int) -> None:
    """Emit replicas corrected event."""
    emit_event(
        body,
        EVENT_REASON_REPLICAS_CORRECTED,
        f"Deployment {workload} scaled to {replicas} replicas",
    )
