"""
hlsign.utils
============

Small, dependency-light helpers shared by every layer:

- bytes.py: hex parsing/rendering, length guards, big-endian u64
- hash.py:  keccak256
"""

from __future__ import annotations

from .bytes import U64_MAX, ensure_len, from_hex, strip0x, to_hex, u64_be
from .hash import keccak256

__all__ = [
    "U64_MAX",
    "ensure_len",
    "from_hex",
    "strip0x",
    "to_hex",
    "u64_be",
    "keccak256",
]
