"""Operator configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping

from .constants import (
    DEFAULT_CONTAINER_PORT,
    DEFAULT_CPU_LIMIT_MILLIS,
    DEFAULT_CPU_REQUEST_MILLIS,
    DEFAULT_REPLICAS,
    DEFAULT_WORKLOAD_IMAGE,
    DEFAULT_WORKLOAD_NAME,
    DEFAULT_WORKLOAD_NAMESPACE,
    OWNER_LOOKUP_INDEX,
    OWNER_LOOKUP_SCAN,
)


@dataclass(frozen=True)
class OperatorConfig:
    """Runtime configuration for the Foo Operator.

    The workload naming fields control how a Foo is mapped to its Deployment.
    ``workload_name_template`` is formatted with the owner's ``name`` and
    ``namespace``. An empty ``workload_namespace`` places the Deployment in
    the owner's namespace.
    """

    workload_name_template: str = DEFAULT_WORKLOAD_NAME
    workload_namespace: str = DEFAULT_WORKLOAD_NAMESPACE
    workload_image: str = DEFAULT_WORKLOAD_IMAGE
    container_port: int = DEFAULT_CONTAINER_PORT
    cpu_request_millis: int = DEFAULT_CPU_REQUEST_MILLIS
    cpu_limit_millis: int = DEFAULT_CPU_LIMIT_MILLIS
    default_replicas: int = DEFAULT_REPLICAS
    owner_lookup: str = OWNER_LOOKUP_INDEX
    resync_interval_seconds: float = 300.0
    reconcile_timeout_seconds: float = 60.0
    request_timeout_seconds: float = 30.0
    retry_delay_seconds: float = 15.0
    metrics_port: int = 8080

    def __post_init__(self) -> None:
        if self.owner_lookup not in (OWNER_LOOKUP_INDEX, OWNER_LOOKUP_SCAN):
            raise ValueError(
                f"owner_lookup must be '{OWNER_LOOKUP_INDEX}' or '{OWNER_LOOKUP_SCAN}', "
                f"got '{self.owner_lookup}'"
            )
        if self.default_replicas < 0:
            raise ValueError("default_replicas must not be negative")
        if self.cpu_request_millis <= 0 or self.cpu_limit_millis <= 0:
            raise ValueError("CPU quantities must be positive")
        if self.cpu_request_millis > self.cpu_limit_millis:
            raise ValueError("CPU request must not exceed CPU limit")
        if min(self.reconcile_timeout_seconds, self.request_timeout_seconds, self.retry_delay_seconds) <= 0:
            raise ValueError("timeouts must be positive")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> OperatorConfig:
        """Build configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            OperatorConfig instance

        Raises:
            ValueError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        return cls(
            workload_name_template=env.get("WORKLOAD_NAME_TEMPLATE", DEFAULT_WORKLOAD_NAME),
            workload_namespace=env.get("WORKLOAD_NAMESPACE", DEFAULT_WORKLOAD_NAMESPACE),
            workload_image=env.get("WORKLOAD_IMAGE", DEFAULT_WORKLOAD_IMAGE),
            container_port=int(env.get("WORKLOAD_CONTAINER_PORT", str(DEFAULT_CONTAINER_PORT))),
            cpu_request_millis=int(
                env.get("WORKLOAD_CPU_REQUEST_MILLIS", str(DEFAULT_CPU_REQUEST_MILLIS))
            ),
            cpu_limit_millis=int(
                env.get("WORKLOAD_CPU_LIMIT_MILLIS", str(DEFAULT_CPU_LIMIT_MILLIS))
            ),
            default_replicas=int(env.get("WORKLOAD_DEFAULT_REPLICAS", str(DEFAULT_REPLICAS))),
            owner_lookup=env.get("OWNER_LOOKUP", OWNER_LOOKUP_INDEX).lower(),
            resync_interval_seconds=float(env.get("RESYNC_INTERVAL_SECONDS", "300")),
            reconcile_timeout_seconds=float(env.get("RECONCILE_TIMEOUT_SECONDS", "60")),
            request_timeout_seconds=float(env.get("K8S_REQUEST_TIMEOUT_SECONDS", "30")),
            retry_delay_seconds=float(env.get("RETRY_DELAY_SECONDS", "15")),
            metrics_port=int(env.get("METRICS_PORT", "8080")),
        )


@lru_cache(maxsize=1)
def get_config() -> OperatorConfig:
    """Return the process-wide configuration, read from the environment once."""
    return OperatorConfig.from_env()
