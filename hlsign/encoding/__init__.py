"""
hlsign.encoding
===============

Public encoding surface for the signing core:

- numeric.py:   float -> wire string / scaled integer, rejecting lossy values
- address.py:   20-byte address <-> hex, strict or lenient
- values.py:    the tagged value algebra (Nil | Bool | Int | Float | Str | Map | Array | OrderRecord)
- canonical.py: deterministic msgpack bytes for actions

This package intentionally keeps a *very* small public API to avoid accidental
divergence from the reference wire format.
"""

from __future__ import annotations

from .address import ZERO_ADDRESS, address_to_bytes, normalize_address, to_address
from .canonical import encode, encode_value
from .numeric import (
    float_to_int,
    float_to_int_for_hashing,
    float_to_usd_int,
    float_to_wire,
)
from .values import Kind, lift, lower

__all__ = [
    # numeric
    "float_to_wire",
    "float_to_int",
    "float_to_usd_int",
    "float_to_int_for_hashing",
    # address
    "ZERO_ADDRESS",
    "address_to_bytes",
    "normalize_address",
    "to_address",
    # canonical
    "Kind",
    "lift",
    "lower",
    "encode",
    "encode_value",
]
