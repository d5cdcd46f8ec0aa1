"""Utility functions for the Foo Operator."""

from .errors import sanitize_dict, sanitize_error_message, sanitize_exception
from .events import emit_event
from .rate_limit import rate_limit_k8s
from .selectors import label_selector_to_string

__all__ = [
    "emit_event",
    "label_selector_to_string",
    "rate_limit_k8s",
    "sanitize_dict",
    "sanitize_error_message",
    "sanitize_exception",
]
