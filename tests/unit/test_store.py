"""Tests for the Kubernetes-backed resource store."""

from __future__ import annotations

import logging
from unittest.mock import Mock, patch

import pytest
import urllib3
from kubernetes.client.exceptions import ApiException

from foo_operator.errors import (
    ConflictError,
    NotFoundError,
    ReconcileCancelled,
    TransientStoreError,
    ValidationError,
)
from foo_operator.models import ObjectKey, ReconcileContext
from foo_operator.services.kubernetes.client import KubernetesStore, translate_api_error


@pytest.fixture(autouse=True)
def no_rate_limit():
    with patch(
        "foo_operator.services.kubernetes.client.rate_limit_k8s", side_effect=lambda fn: fn
    ) as mock_rate_limit:
        yield mock_rate_limit


@pytest.fixture
def k8s_store() -> KubernetesStore:
    return KubernetesStore(custom_api=Mock(), apps_api=Mock(), api_client=Mock())


class TestTranslateApiError:
    """Test cases for translate_api_error."""

    @pytest.mark.parametrize(
        "status,expected",
        [
            (404, NotFoundError),
            (409, ConflictError),
            (400, ValidationError),
            (422, ValidationError),
            (429, TransientStoreError),
            (500, TransientStoreError),
            (503, TransientStoreError),
            (403, TransientStoreError),
        ],
    )
    def test_status_mapping(self, status, expected):
        error = translate_api_error(ApiException(status=status, reason="Reason"), "get_foo")
        assert type(error) is expected
        assert error.status == status
        assert "get_foo failed" in str(error)

    def test_conflict_is_transient(self):
        assert isinstance(translate_api_error(ApiException(status=409), "op"), TransientStoreError)

    def test_transport_error(self):
        error = translate_api_error(urllib3.exceptions.ProtocolError("connection reset"), "op")
        assert type(error) is TransientStoreError
        assert error.status is None


class TestKubernetesStore:
    """Test cases for KubernetesStore."""

    def test_get_foo(self, k8s_store, ctx):
        k8s_store.custom_api.get_namespaced_custom_object.return_value = {"metadata": {}}

        result = k8s_store.get_foo(ObjectKey("tnf", "foo-01"), ctx)

        assert result == {"metadata": {}}
        k8s_store.custom_api.get_namespaced_custom_object.assert_called_once_with(
            _request_timeout=30.0,
            group="tutorial.my.domain",
            version="v1",
            namespace="tnf",
            plural="foos",
            name="foo-01",
        )

    def test_get_foo_not_found(self, k8s_store, ctx):
        k8s_store.custom_api.get_namespaced_custom_object.side_effect = ApiException(status=404)

        with pytest.raises(NotFoundError):
            k8s_store.get_foo(ObjectKey("tnf", "foo-01"), ctx)

    def test_transport_error(self, k8s_store, ctx):
        k8s_store.custom_api.list_cluster_custom_object.side_effect = (
            urllib3.exceptions.ProtocolError("reset")
        )

        with pytest.raises(TransientStoreError):
            k8s_store.list_foos(ctx)

    def test_list_foos(self, k8s_store, ctx):
        k8s_store.custom_api.list_cluster_custom_object.return_value = {
            "items": [{"metadata": {"name": "a"}}, {"metadata": {"name": "b"}}]
        }

        assert [foo["metadata"]["name"] for foo in k8s_store.list_foos(ctx)] == ["a", "b"]

    def test_update_foo_status(self, k8s_store, ctx):
        foo = {"metadata": {"namespace": "tnf", "name": "foo-01"}, "status": {"replicas": 1}}

        k8s_store.update_foo_status(foo, ctx)

        kwargs = k8s_store.custom_api.replace_namespaced_custom_object_status.call_args.kwargs
        assert kwargs["namespace"] == "tnf"
        assert kwargs["name"] == "foo-01"
        assert kwargs["body"] is foo
        assert kwargs["field_manager"] == "foo-operator"

    def test_update_foo_status_conflict(self, k8s_store, ctx):
        k8s_store.custom_api.replace_namespaced_custom_object_status.side_effect = ApiException(
            status=409
        )

        with pytest.raises(ConflictError):
            k8s_store.update_foo_status({"metadata": {"namespace": "a", "name": "b"}}, ctx)

    def test_annotate_foo(self, k8s_store, ctx):
        k8s_store.annotate_foo(ObjectKey("tnf", "foo-01"), {"k": "v"}, ctx)

        kwargs = k8s_store.custom_api.patch_namespaced_custom_object.call_args.kwargs
        assert kwargs["body"] == {"metadata": {"annotations": {"k": "v"}}}

    def test_get_deployment_converts_model(self, k8s_store, ctx):
        model = Mock()
        k8s_store.apps_api.read_namespaced_deployment.return_value = model
        k8s_store.api_client.sanitize_for_serialization.return_value = {"spec": {"replicas": 2}}

        result = k8s_store.get_deployment(ObjectKey("tnf", "jack"), ctx)

        assert result == {"spec": {"replicas": 2}}
        k8s_store.api_client.sanitize_for_serialization.assert_called_once_with(model)

    def test_create_deployment(self, k8s_store, ctx):
        body = {"metadata": {"namespace": "tnf", "name": "jack"}}
        k8s_store.apps_api.create_namespaced_deployment.return_value = body

        assert k8s_store.create_deployment(body, ctx) == body
        kwargs = k8s_store.apps_api.create_namespaced_deployment.call_args.kwargs
        assert kwargs["namespace"] == "tnf"

    def test_update_deployment(self, k8s_store, ctx):
        body = {"metadata": {"namespace": "tnf", "name": "jack"}}
        k8s_store.apps_api.replace_namespaced_deployment.return_value = body

        k8s_store.update_deployment(body, ctx)

        kwargs = k8s_store.apps_api.replace_namespaced_deployment.call_args.kwargs
        assert (kwargs["namespace"], kwargs["name"]) == ("tnf", "jack")

    def test_cancelled_context_skips_call(self, k8s_store):
        ctx = ReconcileContext(logger=logging.getLogger("tests"))
        ctx.cancel()

        with pytest.raises(ReconcileCancelled):
            k8s_store.get_foo(ObjectKey("tnf", "foo-01"), ctx)
        k8s_store.custom_api.get_namespaced_custom_object.assert_not_called()

    def test_timeout_bounded_by_deadline(self, k8s_store):
        ctx = ReconcileContext.with_timeout(logging.getLogger("tests"), 5.0, request_timeout=30.0)
        k8s_store.custom_api.get_namespaced_custom_object.return_value = {}

        k8s_store.get_foo(ObjectKey("tnf", "foo-01"), ctx)

        timeout = k8s_store.custom_api.get_namespaced_custom_object.call_args.kwargs[
            "_request_timeout"
        ]
        assert 0 < timeout <= 5.0

    @patch("foo_operator.services.kubernetes.client.metrics")
    def test_metrics_recorded(self, mock_metrics, k8s_store, ctx):
        k8s_store.custom_api.get_namespaced_custom_object.side_effect = ApiException(status=404)

        with pytest.raises(NotFoundError):
            k8s_store.get_foo(ObjectKey("tnf", "foo-01"), ctx)

        mock_metrics.api_call_total.labels.assert_called_with(
            api_type="k8s", operation="get_foo", result="not_found"
        )
        mock_metrics.api_call_duration_seconds.labels.assert_called_with(
            api_type="k8s", operation="get_foo"
        )
