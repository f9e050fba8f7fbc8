"""
hlsign.encoding.address
=======================

20-byte account address <-> hex conversion.

- address_to_bytes(addr, strict=None, *, config=None) -> 20 bytes
- to_address(raw) -> "0x" + 40 lowercase hex chars

Strict mode (the default) rejects anything that does not decode to exactly
20 bytes. Lenient mode coerces: longer input keeps its *last* 20 bytes,
shorter input is left-padded with zero bytes. Non-hex input is rejected in
both modes.
"""

from __future__ import annotations

from typing import Optional

from ..config import SigningConfig, resolve
from ..errors import InvalidAddress, ValidationError
from ..utils.bytes import BytesLike, from_hex, strip0x

ADDRESS_LENGTH = 20
ZERO_ADDRESS = "0x" + "00" * ADDRESS_LENGTH


def address_to_bytes(
    address: str,
    strict: Optional[bool] = None,
    *,
    config: Optional[SigningConfig] = None,
) -> bytes:
    """
    Decode `address` to 20 bytes.

    `strict` wins when given; otherwise the mode comes from `config`, falling
    back to the process default.
    """
    if address is None:
        raise InvalidAddress("address must not be None")
    if not isinstance(address, str):
        raise InvalidAddress("address must be a string", got=type(address).__name__)
    if strip0x(address.strip()) == "":
        raise InvalidAddress("address must not be empty", value=address)
    try:
        raw = from_hex(address, name="address")
    except ValidationError as e:
        raise InvalidAddress(e.message, value=address) from e

    if strict is None:
        strict = resolve(config).strict_address_length

    if len(raw) == ADDRESS_LENGTH:
        return raw
    if strict:
        raise InvalidAddress(
            f"address must be exactly {ADDRESS_LENGTH} bytes, got {len(raw)}",
            value=address,
            length=len(raw),
        )
    if len(raw) > ADDRESS_LENGTH:
        return raw[-ADDRESS_LENGTH:]
    return raw.rjust(ADDRESS_LENGTH, b"\x00")


def to_address(raw: BytesLike) -> str:
    """Render 20 raw bytes as a lowercase 0x address."""
    data = bytes(raw)
    if len(data) != ADDRESS_LENGTH:
        raise InvalidAddress(f"address must be {ADDRESS_LENGTH} bytes", length=len(data))
    return "0x" + data.hex()


def normalize_address(address: str) -> str:
    """Strict-decode and re-render; yields the canonical lowercase form."""
    return to_address(address_to_bytes(address, strict=True))


__all__ = [
    "ADDRESS_LENGTH",
    "ZERO_ADDRESS",
    "address_to_bytes",
    "to_address",
    "normalize_address",
]
