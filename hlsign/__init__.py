"""
hlsign: action signing core for a Hyperliquid-style exchange client.

Turns structured actions (orders, cancels, transfers, ...) into the exact
bytes, hashes and EIP-712 signatures the exchange verifies, and recovers the
signer from a signature.

    from hlsign import sign_l1_action, build_exchange_payload

    sig = sign_l1_action(key, action, None, nonce, None, is_mainnet=True)
    body = build_exchange_payload(action, nonce, sig)
"""

from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version as _pkg_version

    __version__ = _pkg_version("hlsign")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.1.0+local"

from .encoding import address_to_bytes, encode, float_to_int_for_hashing, float_to_usd_int, float_to_wire
from .errors import (
    CryptoError,
    EncodingError,
    HlSignError,
    InvalidAddress,
    MissingField,
    RoundingRejected,
    ValidationError,
)
from .signing import (
    address_of,
    build_exchange_payload,
    compute_action_hash,
    recover,
    recover_agent_or_user_from_l1_action,
    recover_typed_data,
    recover_user_from_user_signed_action,
    sign,
    sign_l1_action,
    sign_multi_sig_action,
    sign_user_signed_action,
    typed_data_digest,
)
from .types import Signature, TypedData


def get_version() -> str:
    return __version__


__all__ = [
    "__version__",
    "get_version",
    "address_to_bytes",
    "encode",
    "float_to_wire",
    "float_to_usd_int",
    "float_to_int_for_hashing",
    "HlSignError",
    "ValidationError",
    "RoundingRejected",
    "InvalidAddress",
    "MissingField",
    "EncodingError",
    "CryptoError",
    "compute_action_hash",
    "typed_data_digest",
    "sign",
    "address_of",
    "recover",
    "recover_typed_data",
    "sign_l1_action",
    "sign_user_signed_action",
    "sign_multi_sig_action",
    "recover_agent_or_user_from_l1_action",
    "recover_user_from_user_signed_action",
    "build_exchange_payload",
    "Signature",
    "TypedData",
]
