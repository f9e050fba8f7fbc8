"""
Action builders.

Plain functions that assemble the ordered action dicts the exchange expects.
Key order matters: the canonical encoder writes keys exactly as inserted, and
the hash over those bytes is what gets signed.

Two families:

- L1 actions (order, cancel, leverage, margin, ...): signed via
  `hlsign.signing.flows.sign_l1_action`.
- User-signed actions (transfers, withdrawals, agent approval, ...): each
  comes with a `UserSignedPreset` carrying its EIP-712 primary type and
  payload field list, for `hlsign.signing.flows.sign_user_signed_action`.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .encoding.address import normalize_address
from .encoding.numeric import float_to_usd_int, float_to_wire
from .errors import ValidationError
from .types.order import (
    BuilderInfo,
    Cloid,
    LimitOrderType,
    OrderRequest,
    OrderType,
    OrderWire,
    TriggerOrderType,
)


def get_timestamp_ms() -> int:
    return int(time.time() * 1000)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


def order_type_to_wire(order_type: OrderType) -> Dict[str, Any]:
    if isinstance(order_type, LimitOrderType):
        return {"limit": {"tif": order_type.tif}}
    if isinstance(order_type, TriggerOrderType):
        return {
            "trigger": {
                "isMarket": order_type.is_market,
                "triggerPx": float_to_wire(order_type.trigger_px),
                "tpsl": order_type.tpsl,
            }
        }
    raise ValidationError("unknown order type", got=type(order_type).__name__)


def order_request_to_order_wire(req: OrderRequest, asset: int) -> OrderWire:
    if isinstance(asset, bool) or not isinstance(asset, int) or asset < 0:
        raise ValidationError("asset must be a non-negative integer", value=asset)
    return OrderWire(
        asset=asset,
        is_buy=req.is_buy,
        size=float_to_wire(req.sz),
        reduce_only=req.reduce_only,
        price=float_to_wire(req.limit_px) if req.limit_px is not None else None,
        order_type=order_type_to_wire(req.order_type) if req.order_type is not None else None,
        cloid=req.cloid,
    )


def order_wires_to_order_action(
    order_wires: Iterable[OrderWire],
    builder: Optional[BuilderInfo] = None,
    grouping: str = "na",
) -> Dict[str, Any]:
    action: Dict[str, Any] = {
        "type": "order",
        "orders": [w.to_wire() for w in order_wires],
        "grouping": grouping,
    }
    if builder is not None:
        action["builder"] = builder.to_wire()
    return action


def cancel_action(cancels: Iterable[Tuple[int, int]]) -> Dict[str, Any]:
    """Cancel by exchange order id; `cancels` is a sequence of (asset, oid)."""
    return {
        "type": "cancel",
        "cancels": [{"a": asset, "o": oid} for asset, oid in cancels],
    }


def cancel_by_cloid_action(cancels: Iterable[Tuple[int, Cloid]]) -> Dict[str, Any]:
    return {
        "type": "cancelByCloid",
        "cancels": [{"asset": asset, "cloid": cloid.to_raw()} for asset, cloid in cancels],
    }


def update_leverage_action(asset: int, is_cross: bool, leverage: int) -> Dict[str, Any]:
    return {
        "type": "updateLeverage",
        "asset": asset,
        "isCross": is_cross,
        "leverage": leverage,
    }


def update_isolated_margin_action(asset: int, amount: float) -> Dict[str, Any]:
    # ntli is the margin delta in micro-USD; isBuy is always true on the wire.
    return {
        "type": "updateIsolatedMargin",
        "asset": asset,
        "isBuy": True,
        "ntli": float_to_usd_int(amount),
    }


def modify_order_action(modifies: Iterable[Tuple[Union[int, Cloid], OrderWire]]) -> Dict[str, Any]:
    """Replace resting orders; `modifies` is a sequence of (oid or cloid, new order wire).

    The asset slot (`coin`) is taken from the new wire.
    """
    return {
        "type": "modifyOrder",
        "modifies": [
            {
                "coin": wire.asset,
                "oid": oid.to_raw() if isinstance(oid, Cloid) else oid,
                "order": wire.to_wire(),
            }
            for oid, wire in modifies
        ],
    }


def create_sub_account_action(name: str) -> Dict[str, Any]:
    return {"type": "createSubAccount", "name": name}


def sub_account_transfer_action(sub_account_user: str, is_deposit: bool, usd: int) -> Dict[str, Any]:
    # usd is in micro-USD units.
    return {
        "type": "subAccountTransfer",
        "subAccountUser": normalize_address(sub_account_user),
        "isDeposit": is_deposit,
        "usd": usd,
    }


def vault_transfer_action(vault_address: str, is_deposit: bool, usd: int) -> Dict[str, Any]:
    return {
        "type": "vaultTransfer",
        "vaultAddress": normalize_address(vault_address),
        "isDeposit": is_deposit,
        "usd": usd,
    }


def schedule_cancel_action(time_ms: Optional[int] = None) -> Dict[str, Any]:
    """Dead-man switch; without `time_ms` the scheduled cancel is cleared."""
    action: Dict[str, Any] = {"type": "scheduleCancel"}
    if time_ms is not None:
        action["time"] = time_ms
    return action


# ---------------------------------------------------------------------------
# User-signed presets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UserSignedPreset:
    primary_type: str
    payload_types: Tuple[Tuple[str, str], ...]

    def types(self) -> List[Dict[str, str]]:
        return [{"name": n, "type": t} for n, t in self.payload_types]


USD_SEND = UserSignedPreset(
    "HyperliquidTransaction:UsdSend",
    (
        ("hyperliquidChain", "string"),
        ("destination", "string"),
        ("amount", "string"),
        ("time", "uint64"),
    ),
)

SPOT_SEND = UserSignedPreset(
    "HyperliquidTransaction:SpotSend",
    (
        ("hyperliquidChain", "string"),
        ("destination", "string"),
        ("token", "string"),
        ("amount", "string"),
        ("time", "uint64"),
    ),
)

WITHDRAW = UserSignedPreset(
    "HyperliquidTransaction:Withdraw",
    (
        ("hyperliquidChain", "string"),
        ("destination", "string"),
        ("amount", "string"),
        ("time", "uint64"),
    ),
)

USD_CLASS_TRANSFER = UserSignedPreset(
    "HyperliquidTransaction:UsdClassTransfer",
    (
        ("hyperliquidChain", "string"),
        ("amount", "string"),
        ("toPerp", "bool"),
        ("nonce", "uint64"),
    ),
)

APPROVE_AGENT = UserSignedPreset(
    "HyperliquidTransaction:ApproveAgent",
    (
        ("hyperliquidChain", "string"),
        ("agentAddress", "address"),
        ("agentName", "string"),
        ("nonce", "uint64"),
    ),
)

APPROVE_BUILDER_FEE = UserSignedPreset(
    "HyperliquidTransaction:ApproveBuilderFee",
    (
        ("hyperliquidChain", "string"),
        ("maxFeeRate", "string"),
        ("builder", "address"),
        ("nonce", "uint64"),
    ),
)

USER_DEX_ABSTRACTION = UserSignedPreset(
    "HyperliquidTransaction:UserDexAbstraction",
    (
        ("hyperliquidChain", "string"),
        ("user", "address"),
        ("enabled", "bool"),
        ("nonce", "uint64"),
    ),
)

SEND_ASSET = UserSignedPreset(
    "HyperliquidTransaction:SendAsset",
    (
        ("hyperliquidChain", "string"),
        ("destination", "string"),
        ("sourceDex", "string"),
        ("destinationDex", "string"),
        ("token", "string"),
        ("amount", "string"),
        ("fromSubAccount", "string"),
        ("nonce", "uint64"),
    ),
)

SET_REFERRER = UserSignedPreset(
    "HyperliquidTransaction:SetReferrer",
    (
        ("hyperliquidChain", "string"),
        ("code", "string"),
        ("nonce", "uint64"),
    ),
)

TOKEN_DELEGATE = UserSignedPreset(
    "HyperliquidTransaction:TokenDelegate",
    (
        ("hyperliquidChain", "string"),
        ("validator", "address"),
        ("wei", "uint64"),
        ("isUndelegate", "bool"),
        ("nonce", "uint64"),
    ),
)

CONVERT_TO_MULTI_SIG_USER = UserSignedPreset(
    "HyperliquidTransaction:ConvertToMultiSigUser",
    (
        ("hyperliquidChain", "string"),
        ("signers", "string"),
        ("nonce", "uint64"),
    ),
)

PRESETS: Dict[str, UserSignedPreset] = {
    "usdSend": USD_SEND,
    "spotSend": SPOT_SEND,
    "withdraw3": WITHDRAW,
    "usdClassTransfer": USD_CLASS_TRANSFER,
    "approveAgent": APPROVE_AGENT,
    "approveBuilderFee": APPROVE_BUILDER_FEE,
    "userDexAbstraction": USER_DEX_ABSTRACTION,
    "sendAsset": SEND_ASSET,
    "setReferrer": SET_REFERRER,
    "tokenDelegate": TOKEN_DELEGATE,
    "convertToMultiSigUser": CONVERT_TO_MULTI_SIG_USER,
}


def preset_for(action: Dict[str, Any]) -> UserSignedPreset:
    action_type = action.get("type")
    try:
        return PRESETS[action_type]
    except KeyError:
        raise ValidationError("no user-signed preset for action type", type=action_type) from None


def _amount(amount: Union[str, float, int]) -> str:
    return amount if isinstance(amount, str) else str(amount)


def usd_send_action(destination: str, amount: Union[str, float], time_ms: int) -> Dict[str, Any]:
    return {"type": "usdSend", "destination": destination, "amount": _amount(amount), "time": time_ms}


def spot_send_action(
    destination: str, token: str, amount: Union[str, float], time_ms: int
) -> Dict[str, Any]:
    return {
        "type": "spotSend",
        "destination": destination,
        "token": token,
        "amount": _amount(amount),
        "time": time_ms,
    }


def withdraw_action(destination: str, amount: Union[str, float], time_ms: int) -> Dict[str, Any]:
    return {"type": "withdraw3", "destination": destination, "amount": _amount(amount), "time": time_ms}


def usd_class_transfer_action(amount: Union[str, float], to_perp: bool, nonce: int) -> Dict[str, Any]:
    return {"type": "usdClassTransfer", "amount": _amount(amount), "toPerp": to_perp, "nonce": nonce}


def approve_agent_action(agent_address: str, nonce: int, agent_name: Optional[str] = None) -> Dict[str, Any]:
    return {
        "type": "approveAgent",
        "agentAddress": normalize_address(agent_address),
        "agentName": agent_name or "",
        "nonce": nonce,
    }


def approve_builder_fee_action(builder: str, max_fee_rate: str, nonce: int) -> Dict[str, Any]:
    return {
        "type": "approveBuilderFee",
        "maxFeeRate": max_fee_rate,
        "builder": normalize_address(builder),
        "nonce": nonce,
    }


def user_dex_abstraction_action(user: str, enabled: bool, nonce: int) -> Dict[str, Any]:
    return {
        "type": "userDexAbstraction",
        "user": normalize_address(user),
        "enabled": enabled,
        "nonce": nonce,
    }


def send_asset_action(
    destination: str,
    source_dex: str,
    destination_dex: str,
    token: str,
    amount: Union[str, float],
    nonce: int,
    from_sub_account: Optional[str] = None,
) -> Dict[str, Any]:
    """Move a token between dexes or accounts; the empty dex name is the perp dex."""
    return {
        "type": "sendAsset",
        "destination": destination,
        "sourceDex": source_dex,
        "destinationDex": destination_dex,
        "token": token,
        "amount": _amount(amount),
        "fromSubAccount": from_sub_account or "",
        "nonce": nonce,
    }


def set_referrer_action(code: str, nonce: int) -> Dict[str, Any]:
    return {"type": "setReferrer", "code": code, "nonce": nonce}


def token_delegate_action(validator: str, wei: int, is_undelegate: bool, nonce: int) -> Dict[str, Any]:
    return {
        "type": "tokenDelegate",
        "validator": normalize_address(validator),
        "wei": wei,
        "isUndelegate": is_undelegate,
        "nonce": nonce,
    }


def convert_to_multi_sig_user_action(
    authorized_users: Iterable[str], threshold: int, nonce: int
) -> Dict[str, Any]:
    """The signer set travels as a JSON string; users are normalized and sorted."""
    if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 1:
        raise ValidationError("threshold must be a positive integer", value=threshold)
    users = sorted(normalize_address(u) for u in authorized_users)
    if threshold > len(users):
        raise ValidationError(
            "threshold exceeds the number of authorized users", threshold=threshold, users=len(users)
        )
    signers = json.dumps({"authorizedUsers": users, "threshold": threshold})
    return {"type": "convertToMultiSigUser", "signers": signers, "nonce": nonce}


__all__ = [
    "get_timestamp_ms",
    "order_type_to_wire",
    "order_request_to_order_wire",
    "order_wires_to_order_action",
    "cancel_action",
    "cancel_by_cloid_action",
    "update_leverage_action",
    "update_isolated_margin_action",
    "modify_order_action",
    "create_sub_account_action",
    "sub_account_transfer_action",
    "vault_transfer_action",
    "schedule_cancel_action",
    "UserSignedPreset",
    "USD_SEND",
    "SPOT_SEND",
    "WITHDRAW",
    "USD_CLASS_TRANSFER",
    "APPROVE_AGENT",
    "APPROVE_BUILDER_FEE",
    "USER_DEX_ABSTRACTION",
    "SEND_ASSET",
    "SET_REFERRER",
    "TOKEN_DELEGATE",
    "CONVERT_TO_MULTI_SIG_USER",
    "PRESETS",
    "preset_for",
    "usd_send_action",
    "spot_send_action",
    "withdraw_action",
    "usd_class_transfer_action",
    "approve_agent_action",
    "approve_builder_fee_action",
    "user_dex_abstraction_action",
    "send_asset_action",
    "set_referrer_action",
    "token_delegate_action",
    "convert_to_multi_sig_user_action",
]
