"""
hlsign.types.signature
======================

Signing-side data model:

- Signature:    (r, s, v) with v in Ethereum convention (27/28)
- PhantomAgent: {source, connectionId} carrying an action hash into EIP-712
- TypedData:    {domain, types, primaryType, message}

Hashes travel as raw bytes inside `TypedData.message` (that is what the
EIP-712 encoder consumes for bytes32 fields); `to_json_dict()` renders them as
0x-hex for transport and display.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from ..errors import ValidationError
from ..utils.bytes import from_hex, to_hex

_SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
_UINT256_BOUND = 1 << 256


@dataclass(frozen=True)
class Signature:
    r: int
    s: int
    v: int

    def __post_init__(self) -> None:
        for name in ("r", "s", "v"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"signature {name} must be an int", got=type(value).__name__)
        for name in ("r", "s"):
            value = getattr(self, name)
            if not 0 <= value < _UINT256_BOUND:
                raise ValidationError(f"signature {name} does not fit in 32 bytes", value=value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "r": "0x" + self.r.to_bytes(32, "big").hex(),
            "s": "0x" + self.s.to_bytes(32, "big").hex(),
            "v": self.v,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Signature":
        try:
            r, s, v = d["r"], d["s"], d["v"]
        except KeyError as e:
            raise ValidationError("signature is missing a component", field=str(e.args[0])) from e
        return cls(r=_component(r, "r"), s=_component(s, "s"), v=_component(v, "v"))

    def to_bytes(self) -> bytes:
        """65-byte r || s || v form used by most wallets."""
        if not 0 <= self.v <= 0xFF:
            raise ValidationError("signature v does not fit in one byte", value=self.v)
        return self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big") + bytes([self.v])

    def is_low_s(self) -> bool:
        return 0 < self.s <= _SECP256K1_N // 2


def _component(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"signature {name} must be an int or hex string", value=value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        if value.startswith(("0x", "0X")):
            # to_hex(int) style renderings may drop leading zeros
            digits = value[2:]
            try:
                return int(digits, 16) if digits else 0
            except ValueError as e:
                raise ValidationError(f"signature {name} is not hex", value=value) from e
        try:
            return int(value, 10)
        except ValueError as e:
            raise ValidationError(f"signature {name} is not a number", value=value) from e
    raise ValidationError(f"signature {name} has unsupported type", got=type(value).__name__)


@dataclass(frozen=True)
class PhantomAgent:
    source: str
    connection_id: bytes

    def __post_init__(self) -> None:
        if self.source not in ("a", "b"):
            raise ValidationError("phantom agent source must be 'a' or 'b'", value=self.source)
        if len(self.connection_id) != 32:
            raise ValidationError("connectionId must be 32 bytes", length=len(self.connection_id))

    @classmethod
    def from_hash(cls, action_hash: bytes, is_mainnet: bool) -> "PhantomAgent":
        return cls(source="a" if is_mainnet else "b", connection_id=bytes(action_hash))

    def to_message(self) -> Dict[str, Any]:
        return {"source": self.source, "connectionId": self.connection_id}

    @property
    def connection_id_hex(self) -> str:
        return to_hex(self.connection_id)


@dataclass(frozen=True)
class TypedData:
    domain: Dict[str, Any]
    types: Dict[str, List[Dict[str, str]]]
    primary_type: str
    message: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """The EIP-712 shape `eth_account.messages.encode_typed_data` expects."""
        return {
            "domain": dict(self.domain),
            "types": {k: [dict(f) for f in v] for k, v in self.types.items()},
            "primaryType": self.primary_type,
            "message": dict(self.message),
        }

    def to_json_dict(self) -> Dict[str, Any]:
        """Same shape with bytes rendered as 0x-hex, safe for json.dumps."""
        return _hexify(self.to_dict())

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "TypedData":
        """Inverse of `to_json_dict()`: bytes32 fields given as hex become bytes again."""
        try:
            types = {k: [dict(f) for f in v] for k, v in d["types"].items()}
            primary = d["primaryType"]
            message = dict(d["message"])
            domain = dict(d["domain"])
        except KeyError as e:
            raise ValidationError("typed data is missing a section", field=str(e.args[0])) from e
        for f in types.get(primary, []):
            name = f.get("name")
            if f.get("type") == "bytes32" and isinstance(message.get(name), str):
                message[name] = from_hex(message[name], name=name)
        return cls(domain=domain, types=types, primary_type=primary, message=message)


def _hexify(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray)):
        return to_hex(bytes(obj))
    if isinstance(obj, dict):
        return {k: _hexify(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_hexify(v) for v in obj]
    return obj


__all__ = ["Signature", "PhantomAgent", "TypedData"]
