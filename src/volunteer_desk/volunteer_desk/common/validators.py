from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..core.exceptions import ValidationError


def require_non_empty(value: str | None, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_fields(data: Mapping[str, Any], fields: Sequence[str]) -> None:
    """Abort before any mutation when one of ``fields`` is blank."""
    missing = [f for f in fields if data.get(f) is None or not str(data.get(f)).strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def require_min_int(value: Any, field_name: str, minimum: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum}")
    return number


def optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None
