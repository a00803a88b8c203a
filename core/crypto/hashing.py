"""
Module 02 - Hashing Utilities
Hex-digest SHA-256 helpers and the numeric formatting rules used to derive leaves.

This module provides:
- SHA-256 hashing of text to lowercase hex digests
- Pairwise hashing for Merkle parents
- Number formatting and rounding that match the browser demo client

Determinism Notes:
- Text is always encoded as UTF-8 before hashing
- Digests are lowercase hex, 64 characters
- Rounding is half-up (toward +inf), never banker's rounding
"""
from __future__ import annotations

import hashlib
import math
from typing import Union


Number = Union[int, float]


def sha256_hex(text: str) -> str:
    """
    Compute the SHA-256 hex digest of a string.

    Args:
        text: Text to hash (UTF-8 encoded before hashing)

    Returns:
        64-character lowercase hex digest

    Example:
        >>> sha256_hex("hello")
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def hash_concat(left: str, right: str) -> str:
    """
    Hash the concatenation of two hex digests.

    This is the Merkle parent rule: parent = sha256(left + right),
    where the concatenation is of the hex strings themselves.

    Args:
        left: Left child digest
        right: Right child digest

    Returns:
        Hex digest of the concatenation
    """
    return sha256_hex(left + right)


def format_number(value: Number) -> str:
    """
    Render a number the way leaf templates expect it.

    Integral floats drop their fractional part so that ``10`` and ``10.0``
    produce the same leaf text; other floats use the shortest round-trip repr.

    Args:
        value: int or float

    Returns:
        String form of the number

    Raises:
        TypeError: If value is a bool or not a number
        ValueError: If value is NaN or infinite

    Example:
        >>> format_number(500), format_number(10.0), format_number(12.5)
        ('500', '10', '12.5')
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Expected a number, got {type(value).__name__}")

    if isinstance(value, int):
        return str(value)

    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite number: {value}")

    if value.is_integer():
        return str(int(value))
    return repr(value)


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves toward positive infinity.

    Python's round() uses banker's rounding (round(12.5) == 12); the demo
    figures are defined with half-up rounding (12.5 -> 13, -0.5 -> 0).

    Args:
        value: Number to round

    Returns:
        Rounded integer
    """
    return int(math.floor(value + 0.5))


__all__ = [
    "sha256_hex",
    "hash_concat",
    "format_number",
    "round_half_up",
]
