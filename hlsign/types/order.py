"""
hlsign.types.order
==================

Order-side data model.

- Cloid:            16-byte client order id ("0x" + 32 hex chars)
- LimitOrderType / TriggerOrderType: the two order-type shapes
- OrderRequest:     a caller's order intent (floats, coin-agnostic)
- OrderWire:        the fixed-shape projection that gets hashed
- BuilderInfo:      optional builder-fee attachment for order actions

`OrderWire.to_wire()` emits its keys in the mandated order
``a, b, [p], s, r, [t], [c]`` and leaves out absent optional fields entirely.
Converting an OrderRequest into an OrderWire needs the numeric codec and
lives in `hlsign.actions`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..errors import ValidationError
from ..utils.bytes import from_hex

CLOID_LENGTH = 16

TIF_VALUES = ("Alo", "Ioc", "Gtc")
TPSL_VALUES = ("tp", "sl")


@dataclass(frozen=True)
class Cloid:
    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != CLOID_LENGTH:
            raise ValidationError(
                f"cloid must be {CLOID_LENGTH} bytes, got {len(self.raw)}", length=len(self.raw)
            )

    @classmethod
    def from_str(cls, s: str) -> "Cloid":
        if not isinstance(s, str) or not s.startswith(("0x", "0X")):
            raise ValidationError("cloid must be a 0x-prefixed hex string", value=s)
        return cls(from_hex(s, name="cloid"))

    @classmethod
    def from_int(cls, n: int) -> "Cloid":
        if n < 0 or n >= 1 << (8 * CLOID_LENGTH):
            raise ValidationError("cloid integer out of range", value=n)
        return cls(n.to_bytes(CLOID_LENGTH, "big"))

    def to_raw(self) -> str:
        return "0x" + self.raw.hex()

    def __str__(self) -> str:
        return self.to_raw()


@dataclass(frozen=True)
class LimitOrderType:
    tif: str = "Gtc"

    def __post_init__(self) -> None:
        if self.tif not in TIF_VALUES:
            raise ValidationError(f"tif must be one of {TIF_VALUES}", value=self.tif)


@dataclass(frozen=True)
class TriggerOrderType:
    trigger_px: float
    is_market: bool
    tpsl: str

    def __post_init__(self) -> None:
        if self.tpsl not in TPSL_VALUES:
            raise ValidationError(f"tpsl must be one of {TPSL_VALUES}", value=self.tpsl)


OrderType = Union[LimitOrderType, TriggerOrderType]


@dataclass(frozen=True)
class OrderRequest:
    coin: str
    is_buy: bool
    sz: float
    limit_px: Optional[float]
    order_type: Optional[OrderType] = None
    reduce_only: bool = False
    cloid: Optional[Cloid] = None


@dataclass(frozen=True)
class OrderWire:
    asset: int
    is_buy: bool
    size: str
    reduce_only: bool
    price: Optional[str] = None
    order_type: Optional[Dict[str, Any]] = None
    cloid: Optional[Cloid] = None

    def to_wire(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"a": self.asset, "b": self.is_buy}
        if self.price is not None:
            out["p"] = self.price
        out["s"] = self.size
        out["r"] = self.reduce_only
        if self.order_type is not None:
            out["t"] = self.order_type
        if self.cloid is not None:
            out["c"] = self.cloid.to_raw()
        return out


@dataclass(frozen=True)
class BuilderInfo:
    # Builder address and fee in tenths of a basis point.
    builder: str
    fee: int

    def to_wire(self) -> Dict[str, Any]:
        return {"b": self.builder.lower(), "f": self.fee}


__all__ = [
    "CLOID_LENGTH",
    "Cloid",
    "LimitOrderType",
    "TriggerOrderType",
    "OrderType",
    "OrderRequest",
    "OrderWire",
    "BuilderInfo",
]
