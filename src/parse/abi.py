"""Helpers for human-readable ABI signature strings."""

from __future__ import annotations

import re

_FUNCTION_PREFIX = "function "
_FUNCTION_NAME = re.compile(r"^function\s+(\w+)\(")


def is_function_entry(signature: str) -> bool:
    """Return True for ``function ...`` entries (not events, errors, constructors)."""
    return signature.startswith(_FUNCTION_PREFIX)


def extract_function_name(signature: str) -> str | None:
    """Extract the function name from a signature such as
    ``function deposit(uint256 amount) payable``.

    Returns None for non-function entries and unparseable signatures.
    """
    if not is_function_entry(signature):
        return None
    match = _FUNCTION_NAME.match(signature)
    if match is None:
        return None
    return match.group(1)


def exposes_function(abi: tuple[str, ...] | list[str], function_name: str) -> bool:
    """Check whether any function entry in ``abi`` has exactly ``function_name``."""
    return any(extract_function_name(entry) == function_name for entry in abi)


__all__ = ["exposes_function", "extract_function_name", "is_function_entry"]
