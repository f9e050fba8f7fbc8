"""
hlsign.utils.bytes
==================

Lightweight, dependency-free helpers around byte handling:

- Hex helpers: strip0x / to_hex / from_hex
- Length guards: ensure_len
- Integer conversion: u64_be

This module deliberately does **not** import anything outside the stdlib and
the package's error types, so it can be used by every other layer.

Examples
--------
>>> to_hex(b"\\x01\\x02")
'0x0102'
>>> from_hex('0xdeadbeef')
b'\\xde\\xad\\xbe\\xef'
>>> u64_be(1)
b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
"""

from __future__ import annotations

from typing import Union

from ..errors import ValidationError

BytesLike = Union[bytes, bytearray, memoryview]

U64_MAX = (1 << 64) - 1


# -----------------------
# Basic bytes/hex helpers
# -----------------------

def strip0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_hex(data: BytesLike, *, prefix: bool = True) -> str:
    """Return lowercase hex string of data."""
    if isinstance(data, (bytearray, memoryview)):
        data = bytes(data)
    if not isinstance(data, bytes):
        raise TypeError("to_hex expects bytes-like")
    h = data.hex()
    return f"0x{h}" if prefix else h


def from_hex(h: str, *, name: str = "hex") -> bytes:
    """
    Parse a hex string with or without 0x prefix.

    Unlike permissive parsers this never pads odd-length input: half a byte is
    treated as malformed, because every caller here hashes the result.
    """
    if not isinstance(h, str):
        raise ValidationError(f"{name} must be a string", got=type(h).__name__)
    clean = strip0x(h.strip())
    if len(clean) % 2 == 1:
        raise ValidationError(f"{name} has an odd number of hex digits", value=h)
    try:
        return bytes.fromhex(clean)
    except ValueError as e:
        raise ValidationError(f"{name} contains non-hex characters", value=h) from e


def ensure_len(data: BytesLike, n: int, *, name: str = "bytes") -> bytes:
    data_b = bytes(data)
    if len(data_b) != n:
        raise ValidationError(f"{name} must be length {n}, got {len(data_b)}", length=len(data_b))
    return data_b


# -------------------------
# Integer -> big-endian bytes
# -------------------------

def u64_be(x: int, *, name: str = "value") -> bytes:
    """8-byte big-endian encoding of an unsigned 64-bit integer."""
    if isinstance(x, bool) or not isinstance(x, int):
        raise ValidationError(f"{name} must be an integer", got=type(x).__name__)
    if not 0 <= x <= U64_MAX:
        raise ValidationError(f"{name} must fit in an unsigned 64-bit integer", value=x)
    return x.to_bytes(8, "big")


__all__ = [
    "BytesLike",
    "U64_MAX",
    "strip0x",
    "to_hex",
    "from_hex",
    "ensure_len",
    "u64_be",
]
