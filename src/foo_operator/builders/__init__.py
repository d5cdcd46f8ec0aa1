"""Builders for resources derived from Foo specs."""

from .deployment import (
    build_deployment,
    build_owner_reference,
    derive_workload_identity,
    format_milli_cpu,
)

__all__ = [
    "build_deployment",
    "build_owner_reference",
    "derive_workload_identity",
    "format_milli_cpu",
]
