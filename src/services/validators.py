"""Tanımlayıcı ve miktar doğrulayıcıları."""

from __future__ import annotations

from typing import Any

from src.services.exceptions import InvalidArgumentError


def require_identifier(value: Any, field_name: str) -> str:
    """Boş, None veya yalnızca boşluktan oluşan tanımlayıcıları reddeder."""
    if value is None or not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{field_name} boş olamaz")
    return value


def require_positive_quantity(
    quantity: Any,
    message: str,
    error_cls: type[InvalidArgumentError] = InvalidArgumentError,
) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise error_cls(f"{message}. Verilen: {quantity}")
    return quantity
