"""Kubernetes API backed resource store."""

from .client import KubernetesStore, get_kubernetes_store, translate_api_error

__all__ = ["KubernetesStore", "get_kubernetes_store", "translate_api_error"]
