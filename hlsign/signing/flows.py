"""
High-level signing flows: hash, build typed data, sign or recover, in one call.

These mirror what an exchange client does per request:

    sig = sign_l1_action(key, action, None, nonce, None, is_mainnet=True)
    body = build_exchange_payload(action, nonce, sig)

User-signed flows return the prepared action as well, because the action
that goes on the wire must carry the same ``signatureChainId`` and
``hyperliquidChain`` that were signed.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..config import SigningConfig, resolve
from ..types.signature import Signature
from .action_hash import compute_action_hash
from .recover import recover_typed_data
from .signer import PrivateKeyLike, sign
from .typed_data import (
    hyperliquid_chain,
    l1_typed_data,
    multi_sig_typed_data,
    user_signed_typed_data,
)

SignatureLike = Union[Signature, Mapping[str, Any]]


def _as_signature(signature: SignatureLike) -> Signature:
    if isinstance(signature, Signature):
        return signature
    return Signature.from_dict(signature)


def sign_l1_action(
    private_key: PrivateKeyLike,
    action: Mapping[str, Any],
    vault_address: Optional[str],
    nonce: int,
    expires_after: Optional[int],
    is_mainnet: bool,
    *,
    config: Optional[SigningConfig] = None,
) -> Signature:
    action_hash = compute_action_hash(action, nonce, vault_address, expires_after, config=config)
    return sign(l1_typed_data(action_hash, is_mainnet), private_key)


def prepare_user_signed_action(
    action: Mapping[str, Any],
    is_mainnet: bool,
    *,
    config: Optional[SigningConfig] = None,
) -> Dict[str, Any]:
    """Copy of `action` with ``signatureChainId`` defaulted and ``hyperliquidChain`` set."""
    prepared = dict(action)
    prepared.setdefault("signatureChainId", resolve(config).signature_chain_id)
    prepared["hyperliquidChain"] = hyperliquid_chain(is_mainnet)
    return prepared


def sign_user_signed_action(
    private_key: PrivateKeyLike,
    action: Mapping[str, Any],
    payload_types: List[Mapping[str, str]],
    primary_type: str,
    is_mainnet: bool,
    *,
    config: Optional[SigningConfig] = None,
) -> Tuple[Signature, Dict[str, Any]]:
    prepared = prepare_user_signed_action(action, is_mainnet, config=config)
    td = user_signed_typed_data(primary_type, payload_types, prepared, is_mainnet)
    return sign(td, private_key), prepared


def sign_multi_sig_action(
    private_key: PrivateKeyLike,
    inner_action: Mapping[str, Any],
    multi_sig_user: str,
    outer_signer: str,
    nonce: int,
    is_mainnet: bool,
    vault_address: Optional[str] = None,
    expires_after: Optional[int] = None,
) -> Signature:
    td = multi_sig_typed_data(
        inner_action,
        multi_sig_user,
        outer_signer,
        nonce,
        is_mainnet,
        vault_address=vault_address,
        expires_after=expires_after,
    )
    return sign(td, private_key)


def recover_agent_or_user_from_l1_action(
    action: Mapping[str, Any],
    vault_address: Optional[str],
    nonce: int,
    expires_after: Optional[int],
    is_mainnet: bool,
    signature: SignatureLike,
    *,
    config: Optional[SigningConfig] = None,
) -> str:
    action_hash = compute_action_hash(action, nonce, vault_address, expires_after, config=config)
    return recover_typed_data(l1_typed_data(action_hash, is_mainnet), _as_signature(signature))


def recover_user_from_user_signed_action(
    action: Mapping[str, Any],
    signature: SignatureLike,
    payload_types: List[Mapping[str, str]],
    primary_type: str,
    is_mainnet: bool,
) -> str:
    td = user_signed_typed_data(primary_type, payload_types, action, is_mainnet)
    return recover_typed_data(td, _as_signature(signature))


def recover_multi_sig_signer(
    inner_action: Mapping[str, Any],
    multi_sig_user: str,
    outer_signer: str,
    nonce: int,
    is_mainnet: bool,
    signature: SignatureLike,
    vault_address: Optional[str] = None,
    expires_after: Optional[int] = None,
) -> str:
    td = multi_sig_typed_data(
        inner_action,
        multi_sig_user,
        outer_signer,
        nonce,
        is_mainnet,
        vault_address=vault_address,
        expires_after=expires_after,
    )
    return recover_typed_data(td, _as_signature(signature))


def build_exchange_payload(
    action: Mapping[str, Any],
    nonce: int,
    signature: SignatureLike,
    vault_address: Optional[str] = None,
    expires_after: Optional[int] = None,
) -> Dict[str, Any]:
    """Request body for the exchange endpoint; optional keys are omitted when unset."""
    payload: Dict[str, Any] = {
        "action": dict(action),
        "nonce": nonce,
        "signature": _as_signature(signature).to_dict(),
    }
    if vault_address is not None:
        payload["vaultAddress"] = vault_address.lower()
    if expires_after is not None:
        payload["expiresAfter"] = expires_after
    return payload


__all__ = [
    "sign_l1_action",
    "prepare_user_signed_action",
    "sign_user_signed_action",
    "sign_multi_sig_action",
    "recover_agent_or_user_from_l1_action",
    "recover_user_from_user_signed_action",
    "recover_multi_sig_signer",
    "build_exchange_payload",
]
