"""
hlsign.encoding.values
======================

The closed value algebra the canonical encoder accepts:

    Nil | Bool | Int | Float | Str | Map | Array | OrderRecord

Each variant is a frozen dataclass tagged with a `Kind`. Plain Python trees
(dicts, lists, scalars, OrderWire) are turned into variants exactly once, by
`lift()`; everything downstream dispatches on `kind` through a table that is
checked for completeness at import.

Maps are tuples of (key, value) pairs so caller order is part of the value:
two maps with the same entries in a different order are different values and
encode to different bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Mapping, Tuple, Union

from ..errors import EncodingError
from ..types.order import OrderWire

# msgpack can carry ints in [-2**63, 2**64 - 1]
INT_MIN = -(1 << 63)
INT_MAX = (1 << 64) - 1

MAX_DEPTH = 256


class Kind(str, Enum):
    NIL = "nil"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STR = "str"
    MAP = "map"
    ARRAY = "array"
    ORDER = "order"


@dataclass(frozen=True)
class Nil:
    kind: ClassVar[Kind] = Kind.NIL


@dataclass(frozen=True)
class Bool:
    value: bool
    kind: ClassVar[Kind] = Kind.BOOL


@dataclass(frozen=True)
class Int:
    value: int
    kind: ClassVar[Kind] = Kind.INT

    def __post_init__(self) -> None:
        if not INT_MIN <= self.value <= INT_MAX:
            raise EncodingError("integer out of encodable range", value=self.value)


@dataclass(frozen=True)
class Float:
    value: float
    kind: ClassVar[Kind] = Kind.FLOAT


@dataclass(frozen=True)
class Str:
    value: str
    kind: ClassVar[Kind] = Kind.STR


@dataclass(frozen=True)
class Map:
    entries: Tuple[Tuple[str, "Value"], ...]
    kind: ClassVar[Kind] = Kind.MAP


@dataclass(frozen=True)
class Array:
    items: Tuple["Value", ...]
    kind: ClassVar[Kind] = Kind.ARRAY


@dataclass(frozen=True)
class OrderRecord:
    wire: OrderWire
    kind: ClassVar[Kind] = Kind.ORDER


Value = Union[Nil, Bool, Int, Float, Str, Map, Array, OrderRecord]

_VARIANTS = (Nil, Bool, Int, Float, Str, Map, Array, OrderRecord)

NIL = Nil()


# --------------------------
# Plain Python -> Value
# --------------------------

def lift(obj: Any, *, _depth: int = 0) -> Value:
    """
    Convert a plain Python tree into the value algebra.

    Accepted: None, bool, int, float, str, OrderWire, Mapping[str, ...],
    list/tuple, and values that are already variants. Anything else
    (bytes, sets, Decimal, custom classes) raises EncodingError.
    """
    if _depth > MAX_DEPTH:
        raise EncodingError("maximum nesting exceeded", depth=_depth)
    if isinstance(obj, _VARIANTS):
        return obj
    if obj is None:
        return NIL
    # bool before int: bool is an int subclass
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, int):
        return Int(int(obj))
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, str):
        return Str(obj)
    if isinstance(obj, OrderWire):
        return OrderRecord(obj)
    if isinstance(obj, Mapping):
        entries = []
        for k, v in obj.items():
            if not isinstance(k, str):
                raise EncodingError("map keys must be strings", key=repr(k), key_type=type(k).__name__)
            entries.append((k, lift(v, _depth=_depth + 1)))
        return Map(tuple(entries))
    if isinstance(obj, (list, tuple)):
        return Array(tuple(lift(v, _depth=_depth + 1) for v in obj))
    raise EncodingError("unsupported value type", type=type(obj).__name__)


# --------------------------
# Value -> msgpack-ready builtins
# --------------------------

def _lower_map(v: Map) -> Dict[str, Any]:
    return {k: lower(item) for k, item in v.entries}


def _lower_order(v: OrderRecord) -> Dict[str, Any]:
    return _lower_map(lift(v.wire.to_wire()))  # type: ignore[arg-type]


_LOWER: Dict[Kind, Callable[[Any], Any]] = {
    Kind.NIL: lambda v: None,
    Kind.BOOL: lambda v: v.value,
    Kind.INT: lambda v: v.value,
    Kind.FLOAT: lambda v: v.value,
    Kind.STR: lambda v: v.value,
    Kind.MAP: _lower_map,
    Kind.ARRAY: lambda v: [lower(item) for item in v.items],
    Kind.ORDER: _lower_order,
}

_missing = set(Kind) - set(_LOWER)
if _missing:  # pragma: no cover - import-time guard
    raise RuntimeError(f"value kinds without a lowering: {sorted(k.value for k in _missing)}")


def lower(value: Value) -> Any:
    """Turn a variant back into the builtins the msgpack encoder consumes."""
    return _LOWER[value.kind](value)


__all__ = [
    "Kind",
    "Nil",
    "Bool",
    "Int",
    "Float",
    "Str",
    "Map",
    "Array",
    "OrderRecord",
    "Value",
    "NIL",
    "lift",
    "lower",
]
