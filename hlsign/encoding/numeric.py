"""
hlsign.encoding.numeric
=======================

Deterministic float canonicalization for wire strings and scaled integers.

- float_to_wire(x)              -> "123.456789"  (8-decimal precision, no exponent)
- float_to_int(x, power)        -> int(round_half_even(x * 10**power))
- float_to_usd_int(x)           -> float_to_int(x, 6)
- float_to_int_for_hashing(x)   -> float_to_int(x, 8)

Both directions *reject* instead of truncating: a value that would drift
when carried at the target precision raises RoundingRejected.

Rounding note: `float_to_wire` rounds through fixed-point string formatting
(half-up on the decimal expansion of the double), while `float_to_int` rounds
half-to-even. The two mirror two different reference behaviors and are kept
apart on purpose.
"""

from __future__ import annotations

import math
from decimal import Decimal

from ..errors import RoundingRejected, ValidationError

WIRE_DECIMALS = 8
WIRE_TOLERANCE = 1e-12
INT_TOLERANCE = 1e-3

USD_POWER = 6
HASHING_POWER = 8

_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1


def _as_float(x: float, *, name: str) -> float:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        raise ValidationError(f"{name} must be a number", got=type(x).__name__)
    f = float(x)
    if not math.isfinite(f):
        raise RoundingRejected(f, "a finite value")
    return f


def float_to_wire(x: float) -> str:
    """Render `x` with at most 8 decimals, rejecting values that would lose precision."""
    f = _as_float(x, name="wire value")
    rounded = f"{f:.{WIRE_DECIMALS}f}"
    if abs(float(rounded) - f) >= WIRE_TOLERANCE:
        raise RoundingRejected(f, f"{WIRE_DECIMALS} decimals")
    normalized = Decimal(rounded).normalize()
    out = f"{normalized:f}"
    # -0.00000000 survives normalize() as "-0"
    return "0" if out == "-0" else out


def float_to_int(x: float, power: int) -> int:
    """Scale by 10**power and round half-even; drift of 1e-3 or more is rejected."""
    f = _as_float(x, name="scaled value")
    scaled = f * (10 ** power)
    rounded = round(scaled)
    if abs(rounded - scaled) >= INT_TOLERANCE:
        raise RoundingRejected(f, f"10^-{power}")
    if not _I64_MIN <= rounded <= _I64_MAX:
        raise RoundingRejected(f, "a signed 64-bit integer")
    return rounded


def float_to_usd_int(x: float) -> int:
    return float_to_int(x, USD_POWER)


def float_to_int_for_hashing(x: float) -> int:
    return float_to_int(x, HASHING_POWER)


__all__ = [
    "WIRE_DECIMALS",
    "float_to_wire",
    "float_to_int",
    "float_to_usd_int",
    "float_to_int_for_hashing",
]
