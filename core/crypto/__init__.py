"""
Core cryptographic utilities.

Module 02 provides the hex-digest hashing helpers used by the Merkle layer.
"""
from .hashing import (
    sha256_hex,
    hash_concat,
    format_number,
    round_half_up,
)

__all__ = [
    "sha256_hex",
    "hash_concat",
    "format_number",
    "round_half_up",
]
