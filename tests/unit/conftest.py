"""Shared fixtures for unit tests."""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable

import pytest

from foo_operator.config import OperatorConfig
from foo_operator.errors import NotFoundError
from foo_operator.models import ObjectKey, ReconcileContext


class FakeStore:
    """In-memory resource store recording every write."""

    def __init__(self) -> None:
        self.foos: dict[ObjectKey, dict[str, Any]] = {}
        self.deployments: dict[ObjectKey, dict[str, Any]] = {}
        self.writes: list[tuple[str, ObjectKey]] = []
        self.failures: dict[str, Exception] = {}
        self.hooks: dict[str, Callable[[], None]] = {}

    def _enter(self, operation: str, ctx: ReconcileContext) -> None:
        ctx.check()
        if operation in self.failures:
            raise self.failures[operation]

    def _exit(self, operation: str) -> None:
        hook = self.hooks.get(operation)
        if hook is not None:
            hook()

    def add_foo(
        self,
        namespace: str,
        name: str,
        replicas: int = 1,
        link: str | None = None,
        status: dict[str, Any] | None = None,
        **spec: Any,
    ) -> dict[str, Any]:
        foo = {
            "apiVersion": "tutorial.my.domain/v1",
            "kind": "Foo",
            "metadata": {"namespace": namespace, "name": name, "uid": f"uid-{name}"},
            "spec": {"replicas": replicas, **spec},
        }
        if link is not None:
            foo["spec"]["name"] = link
        if status is not None:
            foo["status"] = status
        self.foos[ObjectKey(namespace, name)] = foo
        return foo

    def add_deployment(self, namespace: str, name: str, replicas: int | None = 1) -> dict[str, Any]:
        deployment = {
            "apiVersion": "apps/v1",
            "kind": "Deployment",
            "metadata": {"namespace": namespace, "name": name},
            "spec": {
                "selector": {"matchLabels": {"app": name}},
                "template": {"spec": {"containers": [{"name": name, "image": "custom:1"}]}},
            },
        }
        if replicas is not None:
            deployment["spec"]["replicas"] = replicas
        self.deployments[ObjectKey(namespace, name)] = deployment
        return deployment

    def get_foo(self, key: ObjectKey, ctx: ReconcileContext) -> dict[str, Any]:
        self._enter("get_foo", ctx)
        if key not in self.foos:
            raise NotFoundError(f"foo {key} not found", status=404)
        result = copy.deepcopy(self.foos[key])
        self._exit("get_foo")
        return result

    def list_foos(self, ctx: ReconcileContext) -> list[dict[str, Any]]:
        self._enter("list_foos", ctx)
        return [copy.deepcopy(foo) for foo in self.foos.values()]

    def update_foo_status(self, foo: dict[str, Any], ctx: ReconcileContext) -> dict[str, Any]:
        self._enter("update_foo_status", ctx)
        key = ObjectKey.from_meta(foo["metadata"])
        self.foos[key]["status"] = copy.deepcopy(foo["status"])
        self.writes.append(("update_foo_status", key))
        result = copy.deepcopy(self.foos[key])
        self._exit("update_foo_status")
        return result

    def annotate_foo(
        self, key: ObjectKey, annotations: dict[str, str], ctx: ReconcileContext
    ) -> None:
        self._enter("annotate_foo", ctx)
        if key not in self.foos:
            raise NotFoundError(f"foo {key} not found", status=404)
        self.foos[key]["metadata"].setdefault("annotations", {}).update(annotations)
        self.writes.append(("annotate_foo", key))

    def get_deployment(self, key: ObjectKey, ctx: ReconcileContext) -> dict[str, Any]:
        self._enter("get_deployment", ctx)
        if key not in self.deployments:
            raise NotFoundError(f"deployment {key} not found", status=404)
        return copy.deepcopy(self.deployments[key])

    def create_deployment(self, body: dict[str, Any], ctx: ReconcileContext) -> dict[str, Any]:
        self._enter("create_deployment", ctx)
        key = ObjectKey.from_meta(body["metadata"])
        self.deployments[key] = copy.deepcopy(body)
        self.writes.append(("create_deployment", key))
        return copy.deepcopy(body)

    def update_deployment(self, body: dict[str, Any], ctx: ReconcileContext) -> dict[str, Any]:
        self._enter("update_deployment", ctx)
        key = ObjectKey.from_meta(body["metadata"])
        self.deployments[key] = copy.deepcopy(body)
        self.writes.append(("update_deployment", key))
        return copy.deepcopy(body)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def config() -> OperatorConfig:
    return OperatorConfig()


@pytest.fixture
def ctx() -> ReconcileContext:
    return ReconcileContext(logger=logging.getLogger("tests"))
