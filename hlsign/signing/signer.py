"""
secp256k1 signing over EIP-712 digests.

The digest is computed with ``eth_account.messages.encode_typed_data`` and
signed as-is with ``eth_keys`` (RFC 6979 deterministic nonces, low-s
signatures). No personal-message prefix or second hash is applied.

Private keys are accepted as 32 raw bytes or a 64-digit hex string with or
without ``0x``. They are never logged and never stored beyond the call.
"""

from __future__ import annotations

from typing import Union

from eth_account.messages import encode_typed_data
from eth_keys import keys

from ..encoding.address import to_address
from ..errors import CryptoError, ValidationError, wrap
from ..logging import get_logger
from ..types.signature import Signature, TypedData
from ..utils.bytes import ensure_len, strip0x
from ..utils.hash import keccak256

log = get_logger(__name__)

PrivateKeyLike = Union[str, bytes, bytearray]

SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def _private_key(private_key: PrivateKeyLike) -> keys.PrivateKey:
    # Messages below must never echo the key itself.
    if isinstance(private_key, (bytes, bytearray)):
        raw = bytes(private_key)
    elif isinstance(private_key, str):
        clean = strip0x(private_key.strip())
        try:
            raw = bytes.fromhex(clean)
        except ValueError:
            raise CryptoError("private key is not valid hex") from None
    else:
        raise CryptoError("private key must be hex or bytes", got=type(private_key).__name__)
    if len(raw) != 32:
        raise CryptoError("private key must be 32 bytes", length=len(raw))
    k = int.from_bytes(raw, "big")
    if not 0 < k < SECP256K1_N:
        raise CryptoError("private key is outside the secp256k1 scalar range")
    return keys.PrivateKey(raw)


def typed_data_digest(typed_data: TypedData) -> bytes:
    """keccak256(0x19 || 0x01 || domainSeparator || hashStruct(message))."""
    try:
        signable = encode_typed_data(full_message=typed_data.to_dict())
    except Exception as e:
        raise wrap(
            e,
            as_=ValidationError,
            message="typed data cannot be EIP-712 encoded",
            primary_type=typed_data.primary_type,
            reason=str(e),
        ) from e
    return keccak256(b"\x19" + signable.version + signable.header + signable.body)


def sign_digest(digest: bytes, private_key: PrivateKeyLike) -> Signature:
    digest = ensure_len(digest, 32, name="digest")
    sk = _private_key(private_key)
    sig = sk.sign_msg_hash(digest)
    out = Signature(r=sig.r, s=sig.s, v=sig.v + 27)
    log.debug("signer.signed", digest=digest, v=out.v)
    return out


def sign(typed_data: TypedData, private_key: PrivateKeyLike) -> Signature:
    return sign_digest(typed_data_digest(typed_data), private_key)


def address_of(private_key: PrivateKeyLike) -> str:
    """Lowercase 0x address controlled by `private_key`."""
    return to_address(_private_key(private_key).public_key.to_canonical_address())


__all__ = [
    "PrivateKeyLike",
    "typed_data_digest",
    "sign_digest",
    "sign",
    "address_of",
]
