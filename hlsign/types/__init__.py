"""
hlsign.types
============

Frozen dataclasses for everything that crosses the signing boundary.
"""

from __future__ import annotations

from .order import (
    BuilderInfo,
    Cloid,
    LimitOrderType,
    OrderRequest,
    OrderType,
    OrderWire,
    TriggerOrderType,
)
from .signature import PhantomAgent, Signature, TypedData

__all__ = [
    "BuilderInfo",
    "Cloid",
    "LimitOrderType",
    "OrderRequest",
    "OrderType",
    "OrderWire",
    "TriggerOrderType",
    "PhantomAgent",
    "Signature",
    "TypedData",
]
