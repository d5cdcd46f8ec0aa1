"""Resource store interface consumed by the reconciler and event mapper."""

from __future__ import annotations

from typing import Any, Protocol

from ...models import ObjectKey, ReconcileContext


class ResourceStore(Protocol):
    """Protocol defining the store operations the core depends on.

    Every call raises ``NotFoundError`` for absent objects and another
    ``StoreError`` subclass for any other failure. Calls check ``ctx`` before
    going to the API server and raise ``ReconcileCancelled`` when it expired.
    """

    def get_foo(self, key: ObjectKey, ctx: ReconcileContext) -> dict[str, Any]:
        """Get a Foo by namespace and name."""
        ...

    def list_foos(self, ctx: ReconcileContext) -> list[dict[str, Any]]:
        """List Foos across all namespaces."""
        ...

    def update_foo_status(self, foo: dict[str, Any], ctx: ReconcileContext) -> dict[str, Any]:
        """Replace the status subresource of a Foo.

        The update is conditional on ``metadata.resourceVersion``.
        """
        ...

    def annotate_foo(
        self, key: ObjectKey, annotations: dict[str, str], ctx: ReconcileContext
    ) -> None:
        """Merge annotations into a Foo's metadata."""
        ...

    def get_deployment(self, key: ObjectKey, ctx: ReconcileContext) -> dict[str, Any]:
        """Get a Deployment by namespace and name."""
        ...

    def create_deployment(self, body: dict[str, Any], ctx: ReconcileContext) -> dict[str, Any]:
        """Create a Deployment and return the stored object."""
        ...

    def update_deployment(self, body: dict[str, Any], ctx: ReconcileContext) -> dict[str, Any]:
        """Replace a Deployment.

        The update is conditional on ``metadata.resourceVersion``.
        """
        ...
