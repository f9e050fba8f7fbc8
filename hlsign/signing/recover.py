"""
Public-key recovery from (digest, signature).

Implements the ECDSA recovery formula directly on ``py_ecc``'s secp256k1
primitives so no message prefix or hashing convention sneaks in:

    R = decompress(r + (rec_id // 2) * n, parity = rec_id & 1)
    Q = r^-1 * (s*R - e*G)
    address = keccak256(Q.x || Q.y)[-20:]

py_ecc represents the point at infinity as (0, 0).
"""

from __future__ import annotations

from typing import Tuple

from py_ecc.secp256k1 import secp256k1 as curve

from ..encoding.address import to_address
from ..errors import CryptoError
from ..logging import get_logger
from ..types.signature import Signature, TypedData
from ..utils.bytes import ensure_len
from ..utils.hash import keccak256
from .signer import typed_data_digest

log = get_logger(__name__)

Point = Tuple[int, int]

INFINITY: Point = (0, 0)


def normalize_recovery_id(v: int) -> int:
    """Map Ethereum-style ``v`` onto a recovery id."""
    if isinstance(v, bool) or not isinstance(v, int):
        raise CryptoError("v must be an integer", got=type(v).__name__)
    if v in (27, 28):
        return v - 27
    if v in (0, 1):
        return v
    if v >= 35:
        # EIP-155: v = chain_id * 2 + 35 + rec_id
        return (v - 35) % 2
    raise CryptoError("unsupported signature v", v=v)


def _decompress(x: int, odd: bool) -> Point:
    if x >= curve.P:
        raise CryptoError("R.x is not a field element")
    alpha = (pow(x, 3, curve.P) + curve.B) % curve.P
    beta = pow(alpha, (curve.P + 1) // 4, curve.P)
    if (beta * beta) % curve.P != alpha:
        raise CryptoError("R.x is not on the curve")
    y = beta if (beta & 1) == int(odd) else curve.P - beta
    return (x, y)


def recover_public_key(digest: bytes, signature: Signature) -> Point:
    digest = ensure_len(digest, 32, name="digest")
    r, s = signature.r, signature.s
    if not 0 < r < curve.N:
        raise CryptoError("signature r out of range")
    if not 0 < s < curve.N:
        raise CryptoError("signature s out of range")
    rec_id = normalize_recovery_id(signature.v)

    R = _decompress(r + (rec_id // 2) * curve.N, bool(rec_id & 1))
    if curve.multiply(R, curve.N) != INFINITY:
        raise CryptoError("R is not in the prime-order subgroup")

    e = int.from_bytes(digest, "big") % curve.N
    r_inv = curve.inv(r, curve.N)
    # Q = r^-1 * s * R + r^-1 * (-e) * G
    u1 = (-e * r_inv) % curve.N
    u2 = (s * r_inv) % curve.N
    Q = curve.add(curve.multiply(curve.G, u1), curve.multiply(R, u2))
    if Q == INFINITY:
        raise CryptoError("recovered point is at infinity")
    return Q


def public_key_to_address(Q: Point) -> str:
    x, y = Q
    return to_address(keccak256(x.to_bytes(32, "big") + y.to_bytes(32, "big"))[-20:])


def recover(digest: bytes, signature: Signature) -> str:
    address = public_key_to_address(recover_public_key(digest, signature))
    log.debug("recover.recovered", digest=bytes(digest), address=address)
    return address


def recover_typed_data(typed_data: TypedData, signature: Signature) -> str:
    return recover(typed_data_digest(typed_data), signature)


__all__ = [
    "normalize_recovery_id",
    "recover_public_key",
    "public_key_to_address",
    "recover",
    "recover_typed_data",
]
