"""
Address codec tests (hex <-> 20 bytes, strict and lenient)

Strict decoding is the default and is what the action hasher relies on.
Lenient decoding is opt-in per call, per config, or via the process default.
"""
from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from hlsign import config
from hlsign.config import SigningConfig
from hlsign.encoding.address import (
    ZERO_ADDRESS,
    address_to_bytes,
    normalize_address,
    to_address,
)
from hlsign.errors import ErrorCode, InvalidAddress, ValidationError

ADDR_BYTES = bytes.fromhex("ab" * 20)
ADDR = "0x" + "ab" * 20


# ------------------------------ strict ---------------------------------------

@pytest.mark.parametrize("text", [ADDR, "0X" + "ab" * 20, "ab" * 20, "0x" + "AB" * 20])
def test_strict_accepts_20_bytes(text):
    assert address_to_bytes(text) == ADDR_BYTES


@pytest.mark.parametrize("n", [19, 21, 32])
def test_strict_rejects_other_lengths(n):
    with pytest.raises(InvalidAddress) as ei:
        address_to_bytes("0x" + "11" * n, strict=True)
    assert ei.value.code == ErrorCode.INVALID_ADDRESS
    assert ei.value.data["length"] == n


# ------------------------------ lenient --------------------------------------

def test_lenient_keeps_last_20_bytes_of_longer_input():
    raw = address_to_bytes("0x" + "01" + "ab" * 20, strict=False)
    assert raw == ADDR_BYTES


def test_lenient_left_pads_shorter_input():
    raw = address_to_bytes("0x" + "ab" * 19, strict=False)
    assert raw == b"\x00" + bytes.fromhex("ab" * 19)
    assert len(raw) == 20


@given(st.binary(min_size=1, max_size=40))
def test_lenient_always_yields_20_bytes(data):
    raw = address_to_bytes("0x" + data.hex(), strict=False)
    assert len(raw) == 20
    if len(data) >= 20:
        assert raw == data[-20:]
    else:
        assert raw.endswith(data)


# ------------------------------ always rejected ------------------------------

@pytest.mark.parametrize("strict", [True, False])
@pytest.mark.parametrize(
    "text",
    [
        "0x" + "a" * 39,      # odd digit count
        "0x" + "zz" * 20,     # not hex
        "",
        "0x",
        "   ",
    ],
)
def test_malformed_rejected_in_both_modes(text, strict):
    with pytest.raises(InvalidAddress):
        address_to_bytes(text, strict=strict)


@pytest.mark.parametrize("value", [None, 123, b"\x00" * 20])
def test_non_string_rejected(value):
    with pytest.raises(InvalidAddress):
        address_to_bytes(value)


def test_invalid_address_is_a_validation_error():
    with pytest.raises(ValidationError):
        address_to_bytes("nope")


# ------------------------------ mode selection -------------------------------

def test_mode_from_explicit_config():
    short = "0x" + "ab" * 10
    lenient = SigningConfig(strict_address_length=False)
    assert len(address_to_bytes(short, config=lenient)) == 20
    with pytest.raises(InvalidAddress):
        address_to_bytes(short, config=SigningConfig())


def test_mode_from_process_default():
    short = "0x" + "ab" * 10
    with pytest.raises(InvalidAddress):
        address_to_bytes(short)
    config.set_strict_address_length(False)
    assert len(address_to_bytes(short)) == 20


def test_explicit_strict_wins_over_config():
    short = "0x" + "ab" * 10
    lenient = SigningConfig(strict_address_length=False)
    with pytest.raises(InvalidAddress):
        address_to_bytes(short, strict=True, config=lenient)


# ------------------------------ rendering ------------------------------------

def test_to_address_lowercase_hex():
    assert to_address(bytes(range(20))) == "0x" + bytes(range(20)).hex()
    assert to_address(b"\x00" * 20) == ZERO_ADDRESS


def test_to_address_requires_20_bytes():
    with pytest.raises(InvalidAddress):
        to_address(b"\x01" * 19)


def test_normalize_address_lowercases():
    mixed = "0x5e9ee1089755c3435139848E47E6635505D5A13A"
    assert normalize_address(mixed) == mixed.lower()
