"""Helpers for optional query-string filters."""

from typing import Optional


def int_param(params, name: str) -> Optional[int]:
    """Return ``params[name]`` as an int, or None when absent or not a plain ASCII integer."""
    value = params.get(name)
    if not value or not (value.isascii() and value.isdigit()):
        return None
    return int(value)


__all__ = ["int_param"]
