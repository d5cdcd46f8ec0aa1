"""Label selector helpers."""

from __future__ import annotations

from typing import Any

from ..errors import ValidationError

_OPERATORS = {"In": "in", "NotIn": "notin"}


def _requirement(key: str, operator: str, values: list[str]) -> str:
    if operator in _OPERATORS:
        if not values:
            raise ValidationError(f"selector operator {operator} on '{key}' requires values")
        return f"{key} {_OPERATORS[operator]} ({','.join(sorted(values))})"
    if operator == "Exists":
        if values:
            raise ValidationError(f"selector operator Exists on '{key}' takes no values")
        return key
    if operator == "DoesNotExist":
        if values:
            raise ValidationError(f"selector operator DoesNotExist on '{key}' takes no values")
        return f"!{key}"
    raise ValidationError(f"unsupported selector operator '{operator}'")


def label_selector_to_string(selector: dict[str, Any] | None) -> str:
    """Serialize a LabelSelector the way ``kubectl`` and the API server do.

    Requirements are sorted by key and joined with commas; a missing or empty
    selector serializes to an empty string.

    Args:
        selector: LabelSelector dict with ``matchLabels`` and/or ``matchExpressions``

    Returns:
        Selector string such as ``app=jack,tier in (a,b)``

    Raises:
        ValidationError: If an expression uses an unknown operator or bad values
    """
    if not selector:
        return ""

    requirements: list[tuple[str, str]] = []
    for key, value in (selector.get("matchLabels") or {}).items():
        requirements.append((key, f"{key}={value}"))
    for expression in selector.get("matchExpressions") or []:
        key = expression.get("key", "")
        requirements.append(
            (key, _requirement(key, expression.get("operator", ""), expression.get("values") or []))
        )

    requirements.sort(key=lambda item: item[0])
    return ",".join(text for _, text in requirements)
