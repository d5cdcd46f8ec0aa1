"""Structured logging configuration for the Foo Operator."""

import json
import logging
import sys
from typing import Any

from .constants import CONTROLLER_NAME
from .utils.errors import sanitize_dict


def setup_structured_logging(level: int = logging.INFO) -> None:
    """Configure structured JSON logging."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def log_resource_event(
    logger: logging.Logger,
    controller: str,
    resource_kind: str,
    resource_name: str,
    namespace: str,
    uid: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a structured resource event.

    Extra fields are passed through ``sanitize_dict`` so credentials never
    reach the log stream.
    """
    log_data = {
        "controller": controller,
        "resource": resource_kind,
        "name": resource_name,
        "namespace": namespace,
        "uid": uid,
        "event": event,
        "reason": reason,
        "message": message,
    }
    log_data.update(sanitize_dict(kwargs))
    logger.log(level, json.dumps(log_data, default=str))


def log_owner_event(
    logger: logging.Logger,
    resource_kind: str,
    namespace: str,
    name: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a structured event for an object known only by its key."""
    log_resource_event(
        logger,
        controller=CONTROLLER_NAME,
        resource_kind=resource_kind,
        resource_name=name,
        namespace=namespace,
        uid=kwargs.pop("uid", "unknown"),
        event=event,
        reason=reason,
        message=message,
        level=level,
        **kwargs,
    )
