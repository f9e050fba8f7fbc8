"""
EIP-712 typed-data builders for the three signing schemes.

- L1 actions sign a *phantom agent* whose ``connectionId`` is the action
  hash, under the fixed ``Exchange`` domain (chainId 1337).
- User-signed actions sign the action fields directly under the
  ``HyperliquidSignTransaction`` domain; the chain id comes from the action's
  own ``signatureChainId``.
- Multi-sig wraps an inner action: its action hash plus a JSON rendering of
  the action go into a fixed ``HyperliquidTransaction:MultiSig`` payload.

Every builder returns a fresh `TypedData`; caller-owned mappings are never
mutated.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from ..encoding.address import ZERO_ADDRESS, normalize_address
from ..errors import EncodingError, MissingField, ValidationError
from ..types.signature import PhantomAgent, TypedData
from .action_hash import compute_action_hash

EIP712_DOMAIN_TYPES: List[Dict[str, str]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

L1_DOMAIN_NAME = "Exchange"
L1_CHAIN_ID = 1337
USER_SIGNED_DOMAIN_NAME = "HyperliquidSignTransaction"
DOMAIN_VERSION = "1"

AGENT_TYPES: List[Dict[str, str]] = [
    {"name": "source", "type": "string"},
    {"name": "connectionId", "type": "bytes32"},
]

MULTI_SIG_PRIMARY_TYPE = "HyperliquidTransaction:MultiSig"
MULTI_SIG_TYPES: List[Dict[str, str]] = [
    {"name": "multiSigUser", "type": "address"},
    {"name": "outerSigner", "type": "address"},
    {"name": "action", "type": "string"},
    {"name": "multiSigActionHash", "type": "bytes32"},
]
MULTI_SIG_MAINNET_CHAIN_ID = 0xA4B1   # Arbitrum One
MULTI_SIG_TESTNET_CHAIN_ID = 0x66EEE  # Arbitrum Sepolia


def hyperliquid_chain(is_mainnet: bool) -> str:
    return "Mainnet" if is_mainnet else "Testnet"


def _domain(name: str, chain_id: int) -> Dict[str, Any]:
    return {
        "name": name,
        "version": DOMAIN_VERSION,
        "chainId": chain_id,
        "verifyingContract": ZERO_ADDRESS,
    }


def _types(primary_type: str, fields: List[Mapping[str, str]]) -> Dict[str, List[Dict[str, str]]]:
    return {
        primary_type: [dict(f) for f in fields],
        "EIP712Domain": [dict(f) for f in EIP712_DOMAIN_TYPES],
    }


def parse_chain_id(value: Any) -> int:
    """Parse a 0x-hex chain id such as ``"0x66eee"``."""
    if not isinstance(value, str) or not value.startswith(("0x", "0X")):
        raise ValidationError("signatureChainId must be a 0x-prefixed hex string", value=value)
    try:
        chain_id = int(value[2:], 16)
    except ValueError as e:
        raise ValidationError("signatureChainId is not valid hex", value=value) from e
    if chain_id <= 0:
        raise ValidationError("signatureChainId must be positive", value=value)
    return chain_id


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def l1_typed_data(action_hash: bytes, is_mainnet: bool) -> TypedData:
    agent = PhantomAgent.from_hash(action_hash, is_mainnet)
    return TypedData(
        domain=_domain(L1_DOMAIN_NAME, L1_CHAIN_ID),
        types=_types("Agent", AGENT_TYPES),
        primary_type="Agent",
        message=agent.to_message(),
    )


def user_signed_typed_data(
    primary_type: str,
    payload_types: List[Mapping[str, str]],
    action: Mapping[str, Any],
    is_mainnet: bool,
) -> TypedData:
    """
    Typed data for an action the user signs directly.

    The message is a copy of `action` with ``hyperliquidChain`` set for the
    network; fields not named in `payload_types` ride along and are ignored
    by the EIP-712 encoder.
    """
    if "signatureChainId" not in action:
        raise MissingField("signatureChainId")
    chain_id = parse_chain_id(action["signatureChainId"])
    message = dict(action)
    message["hyperliquidChain"] = hyperliquid_chain(is_mainnet)
    return TypedData(
        domain=_domain(USER_SIGNED_DOMAIN_NAME, chain_id),
        types=_types(primary_type, payload_types),
        primary_type=primary_type,
        message=message,
    )


def multi_sig_typed_data(
    inner_action: Mapping[str, Any],
    multi_sig_user: str,
    outer_signer: str,
    nonce: int,
    is_mainnet: bool,
    vault_address: Optional[str] = None,
    expires_after: Optional[int] = None,
) -> TypedData:
    action_hash = compute_action_hash(inner_action, nonce, vault_address, expires_after)
    try:
        action_json = json.dumps(inner_action, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise EncodingError("inner action is not JSON-serializable", reason=str(e)) from e
    message = {
        "multiSigUser": normalize_address(multi_sig_user),
        "outerSigner": normalize_address(outer_signer),
        "action": action_json,
        "multiSigActionHash": action_hash,
    }
    chain_id = MULTI_SIG_MAINNET_CHAIN_ID if is_mainnet else MULTI_SIG_TESTNET_CHAIN_ID
    return TypedData(
        domain=_domain(USER_SIGNED_DOMAIN_NAME, chain_id),
        types=_types(MULTI_SIG_PRIMARY_TYPE, MULTI_SIG_TYPES),
        primary_type=MULTI_SIG_PRIMARY_TYPE,
        message=message,
    )


__all__ = [
    "EIP712_DOMAIN_TYPES",
    "MULTI_SIG_PRIMARY_TYPE",
    "hyperliquid_chain",
    "parse_chain_id",
    "l1_typed_data",
    "user_signed_typed_data",
    "multi_sig_typed_data",
]
