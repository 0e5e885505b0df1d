"""Lightweight validation helpers."""

from typing import Any

from utils.error_handling import ValidationError


def ensure_present(value: Any, field: str) -> None:
    """Raise ValidationError if value is falsy or blank."""
    if isinstance(value, str):
        value = value.strip()
    if value in (None, "", []):
        raise ValidationError(f"{field} is required")


def ensure_text(value: Any, field: str) -> str:
    """Raise ValidationError unless value is a non-blank string."""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    ensure_present(value, field)
    return value
