"""
Action builder tests: exact key order and value formatting for each action.
"""
from __future__ import annotations

import json
import time

import pytest

from hlsign.actions import (
    APPROVE_AGENT,
    APPROVE_BUILDER_FEE,
    CONVERT_TO_MULTI_SIG_USER,
    PRESETS,
    SEND_ASSET,
    SET_REFERRER,
    SPOT_SEND,
    TOKEN_DELEGATE,
    USD_CLASS_TRANSFER,
    USD_SEND,
    USER_DEX_ABSTRACTION,
    WITHDRAW,
    approve_agent_action,
    approve_builder_fee_action,
    cancel_action,
    cancel_by_cloid_action,
    convert_to_multi_sig_user_action,
    create_sub_account_action,
    get_timestamp_ms,
    modify_order_action,
    order_request_to_order_wire,
    order_type_to_wire,
    order_wires_to_order_action,
    preset_for,
    schedule_cancel_action,
    send_asset_action,
    set_referrer_action,
    spot_send_action,
    sub_account_transfer_action,
    token_delegate_action,
    update_isolated_margin_action,
    update_leverage_action,
    usd_class_transfer_action,
    usd_send_action,
    user_dex_abstraction_action,
    vault_transfer_action,
    withdraw_action,
)
from hlsign.encoding.canonical import encode
from hlsign.errors import RoundingRejected, ValidationError
from hlsign.types.order import (
    BuilderInfo,
    Cloid,
    LimitOrderType,
    OrderRequest,
    TriggerOrderType,
)


# ------------------------------ order types ----------------------------------

def test_limit_order_type_wire():
    assert order_type_to_wire(LimitOrderType("Alo")) == {"limit": {"tif": "Alo"}}


def test_trigger_order_type_wire_key_order():
    wire = order_type_to_wire(TriggerOrderType(trigger_px=100.0, is_market=True, tpsl="sl"))
    assert wire == {"trigger": {"isMarket": True, "triggerPx": "100", "tpsl": "sl"}}
    assert list(wire["trigger"]) == ["isMarket", "triggerPx", "tpsl"]


def test_order_type_validation():
    with pytest.raises(ValidationError):
        LimitOrderType("Day")
    with pytest.raises(ValidationError):
        TriggerOrderType(trigger_px=1.0, is_market=False, tpsl="stop")
    with pytest.raises(ValidationError):
        order_type_to_wire({"limit": {"tif": "Gtc"}})


# ------------------------------ orders ---------------------------------------

def test_order_request_to_wire():
    req = OrderRequest(
        coin="ETH",
        is_buy=True,
        sz=0.0147,
        limit_px=1670.1,
        order_type=LimitOrderType("Ioc"),
    )
    wire = order_request_to_order_wire(req, 4).to_wire()
    assert wire == {
        "a": 4,
        "b": True,
        "p": "1670.1",
        "s": "0.0147",
        "r": False,
        "t": {"limit": {"tif": "Ioc"}},
    }
    assert list(wire) == ["a", "b", "p", "s", "r", "t"]


def test_order_without_price_or_type_omits_fields():
    req = OrderRequest(coin="BTC", is_buy=False, sz=1.0, limit_px=None, reduce_only=True)
    assert order_request_to_order_wire(req, 0).to_wire() == {"a": 0, "b": False, "s": "1", "r": True}


def test_order_with_cloid_appends_c_last():
    cloid = Cloid.from_int(1)
    req = OrderRequest("ETH", True, 1.0, 2000.0, LimitOrderType(), cloid=cloid)
    wire = order_request_to_order_wire(req, 1).to_wire()
    assert list(wire)[-1] == "c"
    assert wire["c"] == "0x" + "0" * 31 + "1"


def test_order_request_rejects_lossy_size():
    req = OrderRequest("ETH", True, 0.123456789, 1.0, LimitOrderType())
    with pytest.raises(RoundingRejected):
        order_request_to_order_wire(req, 1)


@pytest.mark.parametrize("asset", [-1, True, "1", 1.0])
def test_order_request_rejects_bad_asset(asset):
    req = OrderRequest("ETH", True, 1.0, 1.0, LimitOrderType())
    with pytest.raises(ValidationError):
        order_request_to_order_wire(req, asset)


def test_order_action_layout():
    req = OrderRequest("ETH", True, 1.0, 2000.0, LimitOrderType())
    wires = [order_request_to_order_wire(req, 1)]
    action = order_wires_to_order_action(wires)
    assert list(action) == ["type", "orders", "grouping"]
    assert action["type"] == "order"
    assert action["grouping"] == "na"
    assert action["orders"] == [wires[0].to_wire()]


def test_order_action_with_builder_and_grouping():
    req = OrderRequest("ETH", True, 1.0, 2000.0, LimitOrderType())
    builder = BuilderInfo(builder="0x" + "AB" * 20, fee=10)
    action = order_wires_to_order_action(
        [order_request_to_order_wire(req, 1)], builder=builder, grouping="normalTpsl"
    )
    assert list(action) == ["type", "orders", "grouping", "builder"]
    assert action["builder"] == {"b": "0x" + "ab" * 20, "f": 10}
    assert action["grouping"] == "normalTpsl"


# ------------------------------ cloid ----------------------------------------

def test_cloid_forms():
    raw = "0x" + "0123456789abcdef" * 2
    assert Cloid.from_str(raw).to_raw() == raw
    assert str(Cloid.from_int(255)) == "0x" + "0" * 30 + "ff"


@pytest.mark.parametrize("bad", ["0x1234", "1234" * 8, "0x" + "zz" * 16])
def test_cloid_rejects_malformed(bad):
    with pytest.raises(ValidationError):
        Cloid.from_str(bad)


def test_cloid_int_range():
    with pytest.raises(ValidationError):
        Cloid.from_int(-1)
    with pytest.raises(ValidationError):
        Cloid.from_int(1 << 128)


# ------------------------------ other L1 actions -----------------------------

def test_cancel_action():
    assert cancel_action([(87, 28800768235)]) == {
        "type": "cancel",
        "cancels": [{"a": 87, "o": 28800768235}],
    }


def test_cancel_by_cloid_action():
    cloid = Cloid.from_int(9)
    action = cancel_by_cloid_action([(5, cloid)])
    assert action == {"type": "cancelByCloid", "cancels": [{"asset": 5, "cloid": cloid.to_raw()}]}


def test_update_leverage_action():
    action = update_leverage_action(2, True, 10)
    assert list(action) == ["type", "asset", "isCross", "leverage"]
    assert action == {"type": "updateLeverage", "asset": 2, "isCross": True, "leverage": 10}


def test_update_isolated_margin_action():
    action = update_isolated_margin_action(3, 1.5)
    assert action == {"type": "updateIsolatedMargin", "asset": 3, "isBuy": True, "ntli": 1_500_000}
    with pytest.raises(RoundingRejected):
        update_isolated_margin_action(3, 0.0000001)


def test_schedule_cancel_action():
    assert schedule_cancel_action() == {"type": "scheduleCancel"}
    assert schedule_cancel_action(123) == {"type": "scheduleCancel", "time": 123}


def _s(text: str) -> bytes:
    raw = text.encode("utf-8")
    if len(raw) < 32:
        return bytes([0xA0 | len(raw)]) + raw
    return b"\xd9" + bytes([len(raw)]) + raw


def test_modify_order_action_nests_wire_in_fixed_order():
    cloid = Cloid.from_int(1)
    req = OrderRequest("ETH", True, 0.0147, 1670.1, LimitOrderType(tif="Ioc"), cloid=cloid)
    wire = order_request_to_order_wire(req, 4)
    action = modify_order_action([(123, wire)])
    assert list(action) == ["type", "modifies"]
    modify = action["modifies"][0]
    assert list(modify) == ["coin", "oid", "order"]
    assert modify["coin"] == 4
    assert list(modify["order"]) == ["a", "b", "p", "s", "r", "t", "c"]

    expected = (
        b"\x82"
        + _s("type") + _s("modifyOrder")
        + _s("modifies") + b"\x91"
        + b"\x83"
        + _s("coin") + b"\x04"
        + _s("oid") + b"\x7b"
        + _s("order") + b"\x87"
        + _s("a") + b"\x04"
        + _s("b") + b"\xc3"
        + _s("p") + _s("1670.1")
        + _s("s") + _s("0.0147")
        + _s("r") + b"\xc2"
        + _s("t") + b"\x81" + _s("limit") + b"\x81" + _s("tif") + _s("Ioc")
        + _s("c") + _s(cloid.to_raw())
    )
    assert encode(action) == expected


def test_modify_order_encodes_the_same_with_an_order_wire_object():
    wire = order_request_to_order_wire(OrderRequest("BTC", False, 0.5, 30000.0, LimitOrderType()), 0)
    nested = {
        "type": "modifyOrder",
        "modifies": [{"coin": 0, "oid": 77, "order": wire}],
    }
    assert encode(nested) == encode(modify_order_action([(77, wire)]))


def test_modify_order_by_cloid():
    cloid = Cloid.from_int(42)
    wire = order_request_to_order_wire(OrderRequest("ETH", True, 1.0, 2000.0, LimitOrderType()), 1)
    action = modify_order_action([(cloid, wire)])
    assert action["modifies"][0]["oid"] == cloid.to_raw()


def test_create_sub_account_action():
    assert create_sub_account_action("desk-1") == {"type": "createSubAccount", "name": "desk-1"}


def test_sub_account_and_vault_transfers_lowercase_addresses():
    sub = sub_account_transfer_action("0x" + "AB" * 20, True, 1_000_000)
    assert sub == {
        "type": "subAccountTransfer",
        "subAccountUser": "0x" + "ab" * 20,
        "isDeposit": True,
        "usd": 1_000_000,
    }
    vault = vault_transfer_action("0x" + "CD" * 20, False, 5)
    assert list(vault) == ["type", "vaultAddress", "isDeposit", "usd"]
    assert vault["vaultAddress"] == "0x" + "cd" * 20
    with pytest.raises(ValidationError):
        vault_transfer_action("0x1234", True, 1)


# ------------------------------ user-signed presets --------------------------

def test_preset_types_start_with_chain_label():
    for preset in PRESETS.values():
        assert preset.types()[0] == {"name": "hyperliquidChain", "type": "string"}
        assert preset.primary_type.startswith("HyperliquidTransaction:")


def test_preset_lookup():
    assert preset_for(usd_send_action("0xabc", "1", 1)) is USD_SEND
    assert preset_for(withdraw_action("0xabc", "1", 1)) is WITHDRAW
    assert set(PRESETS) == {
        "usdSend",
        "spotSend",
        "withdraw3",
        "usdClassTransfer",
        "approveAgent",
        "approveBuilderFee",
        "userDexAbstraction",
        "sendAsset",
        "setReferrer",
        "tokenDelegate",
        "convertToMultiSigUser",
    }
    with pytest.raises(ValidationError):
        preset_for({"type": "order"})


def test_user_signed_action_shapes():
    assert spot_send_action("0xabc", "PURR:0xc1fb", 2.5, 7) == {
        "type": "spotSend",
        "destination": "0xabc",
        "token": "PURR:0xc1fb",
        "amount": "2.5",
        "time": 7,
    }
    assert usd_class_transfer_action(1, True, 9) == {
        "type": "usdClassTransfer",
        "amount": "1",
        "toPerp": True,
        "nonce": 9,
    }


def test_approve_actions_normalize_addresses():
    agent = approve_agent_action("0x" + "AB" * 20, 1)
    assert agent["agentAddress"] == "0x" + "ab" * 20
    assert agent["agentName"] == ""
    fee = approve_builder_fee_action("0x" + "CD" * 20, "0.001%", 2)
    assert list(fee) == ["type", "maxFeeRate", "builder", "nonce"]
    assert fee["builder"] == "0x" + "cd" * 20


def test_get_timestamp_ms():
    before = int(time.time() * 1000)
    ts = get_timestamp_ms()
    after = int(time.time() * 1000)
    assert before <= ts <= after


# ------------------------------ more user-signed actions ---------------------

def test_user_dex_abstraction_action():
    action = user_dex_abstraction_action("0x" + "AA" * 20, True, 3)
    assert action == {
        "type": "userDexAbstraction",
        "user": "0x" + "aa" * 20,
        "enabled": True,
        "nonce": 3,
    }
    assert preset_for(action) is USER_DEX_ABSTRACTION
    assert [t["name"] for t in USER_DEX_ABSTRACTION.types()] == ["hyperliquidChain", "user", "enabled", "nonce"]


def test_send_asset_action():
    action = send_asset_action("0xabc", "", "spot", "USDC", 12.5, 4)
    assert list(action) == [
        "type",
        "destination",
        "sourceDex",
        "destinationDex",
        "token",
        "amount",
        "fromSubAccount",
        "nonce",
    ]
    assert action["amount"] == "12.5"
    assert action["fromSubAccount"] == ""
    assert send_asset_action("0xabc", "", "spot", "USDC", "1", 4, "0xdef")["fromSubAccount"] == "0xdef"
    assert [t["name"] for t in SEND_ASSET.types()][1:] == list(action)[1:]


def test_set_referrer_action():
    action = set_referrer_action("CODE", 5)
    assert action == {"type": "setReferrer", "code": "CODE", "nonce": 5}
    assert preset_for(action) is SET_REFERRER


def test_token_delegate_action():
    action = token_delegate_action("0x" + "0F" * 20, 10 ** 8, False, 6)
    assert action == {
        "type": "tokenDelegate",
        "validator": "0x" + "0f" * 20,
        "wei": 10 ** 8,
        "isUndelegate": False,
        "nonce": 6,
    }
    assert dict(TOKEN_DELEGATE.payload_types)["wei"] == "uint64"
    assert [t["name"] for t in TOKEN_DELEGATE.types()][1:] == list(action)[1:]


def test_convert_to_multi_sig_user_action():
    users = ["0x" + "BB" * 20, "0x" + "aa" * 20]
    action = convert_to_multi_sig_user_action(users, 2, 7)
    assert list(action) == ["type", "signers", "nonce"]
    assert json.loads(action["signers"]) == {
        "authorizedUsers": ["0x" + "aa" * 20, "0x" + "bb" * 20],
        "threshold": 2,
    }
    assert preset_for(action) is CONVERT_TO_MULTI_SIG_USER


@pytest.mark.parametrize("threshold", [0, 3, True])
def test_convert_to_multi_sig_user_rejects_bad_threshold(threshold):
    with pytest.raises(ValidationError):
        convert_to_multi_sig_user_action(["0x" + "aa" * 20, "0x" + "bb" * 20], threshold, 1)
