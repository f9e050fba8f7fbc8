"""
hlsign.utils.hash
=================

Thin wrapper for the one digest the protocol uses everywhere:

- keccak256(data) -> 32 bytes   (Ethereum-style Keccak, *not* NIST SHA3-256)

Backed by `eth_utils.keccak`, which routes through eth-hash's configured
backend (pycryptodome by default).
"""

from __future__ import annotations

from eth_utils import keccak as _keccak

from .bytes import BytesLike


def keccak256(data: BytesLike) -> bytes:
    """Keccak-256 digest (Ethereum-style)."""
    return _keccak(bytes(data))


__all__ = ["keccak256"]
