"""Вспомогательные утилиты."""

from .sanitizer import (
    mask_sensitive_data,
    mask_headers,
    is_sensitive_key,
    add_sensitive_keys,
)

__all__ = [
    "mask_sensitive_data",
    "mask_headers",
    "is_sensitive_key",
    "add_sensitive_keys",
]
