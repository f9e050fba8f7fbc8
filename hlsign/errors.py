"""
hlsign.errors
-------------

A small, consistent error system for the signing core.

Design goals
------------
- One root `HlSignError` with machine-friendly `code` and optional `data`.
- Concrete subclasses for the three failure domains of signing:
  validation (bad numbers, addresses, missing fields), encoding (values the
  canonical encoder does not know) and crypto (bad keys, bad signatures).
- Safe JSON representation (`to_dict`) suitable for logs and transport bridges.
- Every error here is *permanent*: a deterministic function of bad input.
  Retrying without changing inputs never helps, so `retryable` is always False.

This module uses only stdlib to avoid import cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

# ---------------------------------------------------------------------------
# Error codes & classes
# ---------------------------------------------------------------------------


class ErrorCode(str, Enum):
    INTERNAL = "HLSIGN/INTERNAL"
    CONFIG = "HLSIGN/CONFIG"

    # Input validation
    VALIDATION = "HLSIGN/VALIDATION"
    ROUNDING_REJECTED = "HLSIGN/ROUNDING_REJECTED"
    INVALID_ADDRESS = "HLSIGN/INVALID_ADDRESS"
    MISSING_FIELD = "HLSIGN/MISSING_FIELD"

    # Canonical encoding
    ENCODING = "HLSIGN/ENCODING"

    # Keys / signatures / curve points
    CRYPTO = "HLSIGN/CRYPTO"


@dataclass(eq=False)
class HlSignError(Exception):
    """
    Root error for hlsign components.

    Attributes
    ----------
    code: str
        Machine-stable error code (see ErrorCode).
    message: str
        Human hint suitable for logs; never includes key material.
    data: dict
        Optional machine data (field names, lengths, values). JSON-serializable.
    retryable: bool
        Always False for signing errors; kept for transport bridges.
    cause: Optional[BaseException]
        Wrapped original exception; not included in equality comparison.
    """

    code: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    retryable: bool = False
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        super().__init__(f"{self.code}: {self.message}")

    # ---------------- Public API ----------------

    def with_context(self, **ctx: Any) -> "HlSignError":
        """Return a copy with extra context merged into `data`."""
        # Subclasses have bespoke __init__ signatures; clone without calling them.
        err = type(self).__new__(type(self))
        err.__dict__.update(self.__dict__)
        err.data = {**self.data, **_jsonmap(ctx)}
        Exception.__init__(err, *self.args)
        return err

    def to_dict(self, include_cause: bool = False) -> Dict[str, Any]:
        """JSON-safe shape suitable for logs/RPC bridges."""
        out = {
            "code": str(_code_value(self.code)),
            "message": self.message,
            "data": _jsonmap(self.data),
            "retryable": self.retryable,
        }
        if include_cause and self.cause is not None:
            out["cause"] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause),
            }
        return out

    def __str__(self) -> str:  # pragma: no cover - human formatting
        parts = [f"{_code_value(self.code)}: {self.message}"]
        if self.data:
            preview = ", ".join(f"{k}={_preview(v)}" for k, v in self.data.items())
            parts.append(f"[{preview}]")
        return " ".join(parts)


class InternalError(HlSignError):
    def __init__(self, message="internal error", **data: Any) -> None:
        super().__init__(code=ErrorCode.INTERNAL, message=message, data=_jsonmap(data))


class ConfigError(HlSignError):
    def __init__(self, message="invalid configuration", **data: Any) -> None:
        super().__init__(code=ErrorCode.CONFIG, message=message, data=_jsonmap(data))


class ValidationError(HlSignError):
    def __init__(self, message="invalid input", **data: Any) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION, message=message, data=_jsonmap(data)
        )


class RoundingRejected(ValidationError):
    """A float cannot be carried at the requested precision without drift."""

    def __init__(self, value: float, precision: str, **data: Any) -> None:
        super().__init__(
            message=f"value {value!r} is not representable at {precision}",
            value=repr(value),
            precision=precision,
            **data,
        )
        self.code = ErrorCode.ROUNDING_REJECTED


class InvalidAddress(ValidationError):
    def __init__(self, message="invalid address", **data: Any) -> None:
        super().__init__(message=message, **data)
        self.code = ErrorCode.INVALID_ADDRESS


class MissingField(ValidationError):
    def __init__(self, field_name: str, subject: str = "action") -> None:
        super().__init__(
            message=f"{subject} is missing required field {field_name!r}",
            field=field_name,
            subject=subject,
        )
        self.code = ErrorCode.MISSING_FIELD


class EncodingError(HlSignError):
    def __init__(self, message="value cannot be canonically encoded", **data: Any) -> None:
        super().__init__(code=ErrorCode.ENCODING, message=message, data=_jsonmap(data))


class CryptoError(HlSignError):
    def __init__(self, message="cryptographic operation failed", **data: Any) -> None:
        super().__init__(code=ErrorCode.CRYPTO, message=message, data=_jsonmap(data))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

T = TypeVar("T", bound=HlSignError)


def wrap(exc: BaseException, *, as_: Type[T] = InternalError, message: str = "wrapped exception", **ctx: Any) -> T:
    """
    Wrap any exception into an HlSignError subclass, attaching context.
    If `exc` is already an HlSignError, returns a context-enriched copy.
    """
    if isinstance(exc, HlSignError):
        return exc.with_context(**ctx)  # type: ignore[return-value]
    err = as_(message, **ctx)  # type: ignore[call-arg]
    err.cause = exc
    return err


def _code_value(code: Any) -> str:
    return code.value if isinstance(code, Enum) else str(code)


def _jsonmap(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in data.items()}


def _coerce_json(v: Any) -> Any:
    # Keep JSON primitives; stringify the rest; hex-encode bytes.
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    try:
        return str(v)
    except Exception:
        return "<unprintable>"


def _preview(v: Any, limit: int = 96) -> str:
    s = str(_coerce_json(v))
    return s if len(s) <= limit else s[:limit] + "…"


__all__ = [
    "ErrorCode",
    "HlSignError",
    "InternalError",
    "ConfigError",
    "ValidationError",
    "RoundingRejected",
    "InvalidAddress",
    "MissingField",
    "EncodingError",
    "CryptoError",
    "wrap",
]
