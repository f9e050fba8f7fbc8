"""
Action hash
===========

Builds the content hash an L1 action is signed through:

    preimage = encode(action)
             || nonce            (8 bytes, big-endian)
             || 0x00                              # no vault
              | 0x01 || vault_address (20 bytes)  # vault
             [|| 0x00 || expires_after (8 bytes, big-endian)]

    action_hash = keccak256(preimage)

The concatenation order is fixed by the protocol. The "no vault" marker and
the expiry prefix happen to share the byte value 0x00; they are independent
markers and both are written as-is.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..config import SigningConfig
from ..encoding.address import ADDRESS_LENGTH, address_to_bytes
from ..encoding.canonical import encode
from ..errors import InvalidAddress
from ..logging import get_logger
from ..utils.bytes import u64_be
from ..utils.hash import keccak256

log = get_logger(__name__)

NO_VAULT = b"\x00"
HAS_VAULT = b"\x01"
EXPIRY_PREFIX = b"\x00"


def build_preimage(
    action: Mapping[str, Any],
    nonce: int,
    vault_address: Optional[str] = None,
    expires_after: Optional[int] = None,
    *,
    config: Optional[SigningConfig] = None,
) -> bytes:
    """Return the exact bytes `compute_action_hash` feeds to keccak256."""
    out = bytearray(encode(action))
    out += u64_be(nonce, name="nonce")
    if vault_address is None:
        out += NO_VAULT
    else:
        # The vault slot is fixed-width on the wire; lenient coercion never applies here.
        raw = address_to_bytes(vault_address, strict=True, config=config)
        if len(raw) != ADDRESS_LENGTH:  # pragma: no cover - strict decode guarantees it
            raise InvalidAddress("vault address must decode to 20 bytes", length=len(raw))
        out += HAS_VAULT
        out += raw
    if expires_after is not None:
        out += EXPIRY_PREFIX
        out += u64_be(expires_after, name="expires_after")
    return bytes(out)


def compute_action_hash(
    action: Mapping[str, Any],
    nonce: int,
    vault_address: Optional[str] = None,
    expires_after: Optional[int] = None,
    *,
    config: Optional[SigningConfig] = None,
) -> bytes:
    preimage = build_preimage(action, nonce, vault_address, expires_after, config=config)
    digest = keccak256(preimage)
    log.debug(
        "action_hash.computed",
        nonce=nonce,
        vault=vault_address is not None,
        expires=expires_after is not None,
        preimage_len=len(preimage),
        action_hash=digest,
    )
    return digest


__all__ = ["build_preimage", "compute_action_hash"]
