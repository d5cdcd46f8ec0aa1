"""Kubernetes API implementation of the resource store."""

from __future__ import annotations

import time
from typing import Any, Callable

import urllib3
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from ... import metrics
from ...constants import API_GROUP, API_VERSION, FIELD_MANAGER, PLURAL_FOO
from ...errors import (
    ConflictError,
    NotFoundError,
    StoreError,
    TransientStoreError,
    ValidationError,
)
from ...models import ObjectKey, ReconcileContext
from ...utils.errors import sanitize_exception
from ...utils.rate_limit import rate_limit_k8s


def translate_api_error(error: Exception, operation: str) -> StoreError:
    """Map a Kubernetes client exception onto the store error taxonomy.

    Args:
        error: Exception raised by the Kubernetes client
        operation: Name of the store operation, used in the message

    Returns:
        StoreError subclass describing the failure
    """
    if isinstance(error, ApiException):
        status = error.status
        reason = error.reason
        message = f"{operation} failed: {status} {reason}"
        if status == 404:
            return NotFoundError(message, status=status, reason=reason)
        if status == 409:
            return ConflictError(message, status=status, reason=reason)
        if status in (400, 422):
            return ValidationError(message, status=status, reason=reason)
        return TransientStoreError(message, status=status, reason=reason)
    return TransientStoreError(f"{operation} failed: {sanitize_exception(error)}")


class KubernetesStore:
    """Resource store backed by the Kubernetes API server."""

    def __init__(
        self,
        custom_api: client.CustomObjectsApi,
        apps_api: client.AppsV1Api,
        api_client: client.ApiClient | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            custom_api: Client for the Foo custom resource
            apps_api: Client for Deployments
            api_client: Client used to turn typed models into plain dicts
        """
        self.custom_api = custom_api
        self.apps_api = apps_api
        self.api_client = api_client or client.ApiClient()

    def _call(
        self,
        operation: str,
        fn: Callable[..., Any],
        ctx: ReconcileContext,
        **kwargs: Any,
    ) -> Any:
        timeout = ctx.timeout()
        start_time = time.time()
        try:
            result = rate_limit_k8s(fn)(_request_timeout=timeout, **kwargs)
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="success").inc()
            return result
        except (ApiException, urllib3.exceptions.HTTPError) as e:
            error = translate_api_error(e, operation)
            result_label = "not_found" if isinstance(error, NotFoundError) else "error"
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result=result_label).inc()
            raise error from e
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation=operation).observe(duration)

    def _to_dict(self, obj: Any) -> dict[str, Any]:
        if isinstance(obj, dict):
            return obj
        return self.api_client.sanitize_for_serialization(obj)

    def get_foo(self, key: ObjectKey, ctx: ReconcileContext) -> dict[str, Any]:
        return self._call(
            "get_foo",
            self.custom_api.get_namespaced_custom_object,
            ctx,
            group=API_GROUP,
            version=API_VERSION,
            namespace=key.namespace,
            plural=PLURAL_FOO,
            name=key.name,
        )

    def list_foos(self, ctx: ReconcileContext) -> list[dict[str, Any]]:
        response = self._call(
            "list_foos",
            self.custom_api.list_cluster_custom_object,
            ctx,
            group=API_GROUP,
            version=API_VERSION,
            plural=PLURAL_FOO,
        )
        return list(response.get("items", []))

    def update_foo_status(self, foo: dict[str, Any], ctx: ReconcileContext) -> dict[str, Any]:
        meta = foo.get("metadata", {})
        return self._call(
            "update_foo_status",
            self.custom_api.replace_namespaced_custom_object_status,
            ctx,
            group=API_GROUP,
            version=API_VERSION,
            namespace=meta.get("namespace"),
            plural=PLURAL_FOO,
            name=meta.get("name"),
            body=foo,
            field_manager=FIELD_MANAGER,
        )

    def annotate_foo(
        self, key: ObjectKey, annotations: dict[str, str], ctx: ReconcileContext
    ) -> None:
        self._call(
            "annotate_foo",
            self.custom_api.patch_namespaced_custom_object,
            ctx,
            group=API_GROUP,
            version=API_VERSION,
            namespace=key.namespace,
            plural=PLURAL_FOO,
            name=key.name,
            body={"metadata": {"annotations": annotations}},
            field_manager=FIELD_MANAGER,
        )

    def get_deployment(self, key: ObjectKey, ctx: ReconcileContext) -> dict[str, Any]:
        deployment = self._call(
            "get_deployment",
            self.apps_api.read_namespaced_deployment,
            ctx,
            name=key.name,
            namespace=key.namespace,
        )
        return self._to_dict(deployment)

    def create_deployment(self, body: dict[str, Any], ctx: ReconcileContext) -> dict[str, Any]:
        deployment = self._call(
            "create_deployment",
            self.apps_api.create_namespaced_deployment,
            ctx,
            namespace=body["metadata"]["namespace"],
            body=body,
            field_manager=FIELD_MANAGER,
        )
        return self._to_dict(deployment)

    def update_deployment(self, body: dict[str, Any], ctx: ReconcileContext) -> dict[str, Any]:
        deployment = self._call(
            "update_deployment",
            self.apps_api.replace_namespaced_deployment,
            ctx,
            name=body["metadata"]["name"],
            namespace=body["metadata"]["namespace"],
            body=body,
            field_manager=FIELD_MANAGER,
        )
        return self._to_dict(deployment)


def get_kubernetes_store() -> KubernetesStore:
    """Build a KubernetesStore from in-cluster config or the local kubeconfig.

    Returns:
        KubernetesStore instance
    """
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()

    api_client = client.ApiClient()
    return KubernetesStore(
        custom_api=client.CustomObjectsApi(api_client),
        apps_api=client.AppsV1Api(api_client),
        api_client=api_client,
    )
