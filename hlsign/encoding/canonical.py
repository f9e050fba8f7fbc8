"""
Canonical action encoder
========================

Deterministic msgpack bytes for actions, matching the cross-language
reference wire format byte for byte:

- maps: count header, then (key, value) pairs in *caller order*, never sorted
- arrays: count header, then items in order
- OrderWire: a map with keys ``a, b, [p], s, r, [t], [c]``; absent optional
  fields are left out, never written as nil
- scalars: nil / bool / smallest-width int / float64 / UTF-8 str

The output is hashed and the hash is what gets signed, so identical logical
input (same keys, same order, same value types) must always give identical
bytes.

Public API:
- encode(obj) -> bytes           plain Python tree (dict/list/scalars/OrderWire)
- encode_value(value) -> bytes   an already-lifted `Value`
"""

from __future__ import annotations

from typing import Any

import msgspec

from ..errors import EncodingError
from .values import Value, lift, lower

# msgspec writes dicts in insertion order and floats as float64.
_ENCODER = msgspec.msgpack.Encoder()


def encode_value(value: Value) -> bytes:
    plain = lower(value)
    try:
        return _ENCODER.encode(plain)
    except (TypeError, OverflowError, msgspec.EncodeError) as e:
        raise EncodingError(str(e)) from e


def encode(obj: Any) -> bytes:
    """Canonical bytes for a plain Python value tree."""
    return encode_value(lift(obj))


__all__ = ["encode", "encode_value"]
