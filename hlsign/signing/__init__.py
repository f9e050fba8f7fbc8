"""
hlsign.signing
==============

- action_hash.py: keccak256 over canonical bytes, nonce, vault and expiry
- typed_data.py:  EIP-712 structures for the L1, user-signed and multi-sig schemes
- signer.py:      EIP-712 digest and secp256k1 signing
- recover.py:     signer address recovery from (digest, signature)
- flows.py:       one-call sign/recover helpers and the exchange request body

`hlsign.signing.recover` is the re-exported function; import module-level
helpers with `from hlsign.signing.recover import ...`.
"""

from __future__ import annotations

from .action_hash import build_preimage, compute_action_hash
from .flows import (
    build_exchange_payload,
    prepare_user_signed_action,
    recover_agent_or_user_from_l1_action,
    recover_multi_sig_signer,
    recover_user_from_user_signed_action,
    sign_l1_action,
    sign_multi_sig_action,
    sign_user_signed_action,
)
from .recover import normalize_recovery_id, recover, recover_typed_data
from .signer import address_of, sign, sign_digest, typed_data_digest
from .typed_data import l1_typed_data, multi_sig_typed_data, user_signed_typed_data

__all__ = [
    "build_preimage",
    "compute_action_hash",
    "l1_typed_data",
    "user_signed_typed_data",
    "multi_sig_typed_data",
    "typed_data_digest",
    "sign_digest",
    "sign",
    "address_of",
    "normalize_recovery_id",
    "recover",
    "recover_typed_data",
    "sign_l1_action",
    "prepare_user_signed_action",
    "sign_user_signed_action",
    "sign_multi_sig_action",
    "recover_agent_or_user_from_l1_action",
    "recover_user_from_user_signed_action",
    "recover_multi_sig_signer",
    "build_exchange_payload",
]
