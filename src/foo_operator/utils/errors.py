"""Error sanitization utilities to prevent credential leakage in logs and events."""

import re
from typing import Any


# Patterns that might expose credentials from the Kubernetes client
SENSITIVE_PATTERNS = [
    r"(authorization)[:\s]+(?:bearer|basic)?\s*[^\s,;'\"]+",
    r"(bearer)\s+[A-Za-z0-9\-_\.=]+",
    r"(client[_\-\s]?(?:certificate|key)[_\-\s]?data)[:\s]+[^\s,;'\"]+",
    r"(password)[:=\s]+[^\s,;'\"]+",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "authorization",
    "token",
    "password",
    "secret",
    "client-key-data",
    "client-certificate-data",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove credentials.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with credentials redacted
    """
    sanitized = message
    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, r"\1 [REDACTED]", sanitized, flags=re.IGNORECASE)
    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    return sanitize_error_message(str(error))


def sanitize_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """Sanitize dictionary by redacting sensitive fields.

    Args:
        data: Dictionary to sanitize
        sensitive_keys: Additional keys to redact (merged with SENSITIVE_FIELDS)

    Returns:
        Sanitized dictionary with sensitive values redacted
    """
    all_sensitive = SENSITIVE_FIELDS | (sensitive_keys or set())
    sanitized: dict[str, Any] = {}

    for key, value in data.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in all_sensitive):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            sanitized[key] = sanitize_error_message(value)
        else:
            sanitized[key] = value

    return sanitized
