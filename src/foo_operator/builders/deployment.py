"""Builder for the Deployment managed on behalf of a Foo."""

from __future__ import annotations

import re
from typing import Any

from ..config import OperatorConfig
from ..constants import (
    API_GROUP_VERSION,
    DEFAULT_IMAGE_PULL_POLICY,
    KIND_FOO,
    LABEL_APP,
)
from ..errors import ValidationError
from ..models import ObjectKey

_DNS1123_LABEL_RE = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
_MAX_LABEL_LENGTH = 63

# Container port names are IANA service names
_MAX_PORT_NAME_LENGTH = 15


def format_milli_cpu(millis: int) -> str:
    """Format a CPU quantity given in millicores the way the API server does.

    Args:
        millis: CPU quantity in millicores

    Returns:
        Quantity string, e.g. ``"250m"`` or ``"1"``
    """
    if millis % 1000 == 0:
        return str(millis // 1000)
    return f"{millis}m"


def derive_workload_identity(owner_key: ObjectKey, config: OperatorConfig) -> ObjectKey:
    """Derive the Deployment identity for an owner.

    The name comes from ``config.workload_name_template`` formatted with the
    owner's ``name`` and ``namespace``. The namespace is
    ``config.workload_namespace``, or the owner's namespace when that is empty.
    The name doubles as the container name and the ``app`` label value, so it
    must be a DNS-1123 label.

    Args:
        owner_key: Namespace and name of the Foo
        config: Operator configuration

    Returns:
        Namespace and name of the Deployment

    Raises:
        ValidationError: If the template is malformed or yields an invalid name
    """
    try:
        name = config.workload_name_template.format(
            name=owner_key.name, namespace=owner_key.namespace
        )
    except (KeyError, IndexError, ValueError) as e:
        raise ValidationError(
            f"invalid workload name template '{config.workload_name_template}': {e}"
        ) from e

    namespace = config.workload_namespace or owner_key.namespace

    if len(name) > _MAX_LABEL_LENGTH or not _DNS1123_LABEL_RE.match(name):
        raise ValidationError(f"derived workload name '{name}' is not a valid DNS-1123 label")
    if len(namespace) > _MAX_LABEL_LENGTH or not _DNS1123_LABEL_RE.match(namespace):
        raise ValidationError(f"workload namespace '{namespace}' is not a valid DNS-1123 label")

    return ObjectKey(namespace, name)


def build_owner_reference(owner: dict[str, Any]) -> dict[str, Any]:
    """Build the controller owner reference pointing at a Foo."""
    meta = owner.get("metadata", {})
    return {
        "apiVersion": API_GROUP_VERSION,
        "kind": KIND_FOO,
        "name": meta.get("name"),
        "uid": meta.get("uid"),
        "blockOwnerDeletion": True,
        "controller": True,
    }


def _port_name(workload_name: str) -> str:
    return workload_name[:_MAX_PORT_NAME_LENGTH].rstrip("-.")


def build_deployment(
    owner: dict[str, Any],
    identity: ObjectKey,
    config: OperatorConfig,
) -> dict[str, Any]:
    """Create the desired Deployment manifest for a Foo.

    The replica count is ``config.default_replicas`` regardless of the Foo's
    ``spec.replicas``; the reconciler corrects it afterwards. Image, port and
    CPU quantities fall back to the configured defaults unless the Foo spec
    overrides them.

    Args:
        owner: Foo object
        identity: Deployment namespace and name
        config: Operator configuration

    Returns:
        Deployment manifest dict
    """
    spec = owner.get("spec", {})
    resources = spec.get("resources", {})
    labels = {LABEL_APP: identity.name}

    cpu_request = resources.get("cpuRequest", format_milli_cpu(config.cpu_request_millis))
    cpu_limit = resources.get("cpuLimit", format_milli_cpu(config.cpu_limit_millis))

    container = {
        "name": identity.name,
        "image": spec.get("image", config.workload_image),
        "imagePullPolicy": DEFAULT_IMAGE_PULL_POLICY,
        "resources": {
            "limits": {"cpu": cpu_limit},
            "requests": {"cpu": cpu_request},
        },
        "ports": [
            {
                "containerPort": int(spec.get("port", config.container_port)),
                "name": _port_name(identity.name),
            }
        ],
    }

    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {
            "name": identity.name,
            "namespace": identity.namespace,
            "labels": dict(labels),
            "ownerReferences": [build_owner_reference(owner)],
        },
        "spec": {
            "replicas": config.default_replicas,
            "selector": {"matchLabels": dict(labels)},
            "template": {
                "metadata": {"labels": dict(labels)},
                "spec": {"containers": [container]},
            },
        },
    }
