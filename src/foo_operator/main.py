"""Main entry point for the Foo Operator.

Run with ``kopf run -m foo_operator.main``.
"""

from __future__ import annotations

from typing import Any

import kopf

from . import handlers  # noqa: F401
from . import health
from . import logging as structured_logging
from .config import get_config


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
    """Configure the operator."""
    config = get_config()

    # Set up structured JSON logging
    structured_logging.setup_structured_logging()

    # Use annotations so kopf's bookkeeping never competes with our status writes
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()

    settings.posting.level = 0
    settings.networking.request_timeout = config.request_timeout_seconds
    settings.execution.max_workers = 4

    # Start metrics HTTP server with health check endpoints
    health.start_metrics_server(config.metrics_port)
    health.set_ready(True)


@kopf.on.cleanup()
def shutdown(**_: Any) -> None:
    """Report not-ready while the operator shuts down."""
    health.set_ready(False)
