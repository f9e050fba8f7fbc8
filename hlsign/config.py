"""
hlsign configuration.

Goals
-----
- Zero external deps (stdlib only).
- Layered config with clear precedence:
    1) Explicit overrides passed to `load()` (highest)
    2) Environment variables (HLSIGN_*)
    3) Built-in defaults (lowest)
- A frozen, validated dataclass that callers thread explicitly through the
  codec/hasher APIs.

The signing core has exactly one piece of process-wide state: the *default*
`SigningConfig` used when a caller does not pass one. It is swapped by
rebinding a module global, so readers see either the old or the new value
(last write wins).

Environment
-----------
- HLSIGN_STRICT_ADDRESS_LENGTH: "1"/"true"/"yes"/"on" or "0"/"false"/"no"/"off"
- HLSIGN_SIGNATURE_CHAIN_ID:    hex chain id injected into user-signed actions
"""

from __future__ import annotations

import os
import re
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

from .errors import ConfigError

# ------------------------------
# Defaults & helpers
# ------------------------------

ENV_STRICT_ADDRESS_LENGTH = "HLSIGN_STRICT_ADDRESS_LENGTH"
ENV_SIGNATURE_CHAIN_ID = "HLSIGN_SIGNATURE_CHAIN_ID"

# Arbitrum Sepolia; what the reference SDK stamps on user-signed actions.
DEFAULT_SIGNATURE_CHAIN_ID = "0x66eee"

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}
_HEX_RE = re.compile(r"^0x[0-9a-fA-F]+$")


def _parse_bool(name: str, v: str) -> bool:
    s = v.strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {v!r}", variable=name, value=v)


def _env_bool(name: str, default: bool) -> bool:
    v = os.environ.get(name)
    if v is None or v.strip() == "":
        return default
    return _parse_bool(name, v)


def _env_str(name: str, default: str) -> str:
    v = os.environ.get(name)
    return v.strip() if v and v.strip() else default


# ------------------------------
# Typed configuration model
# ------------------------------

@dataclass(frozen=True)
class SigningConfig:
    # Strict: addresses must decode to exactly 20 bytes.
    # Lenient: longer input keeps its last 20 bytes, shorter input is left-padded.
    strict_address_length: bool = True
    signature_chain_id: str = DEFAULT_SIGNATURE_CHAIN_ID

    def validate(self) -> "SigningConfig":
        if not isinstance(self.strict_address_length, bool):
            raise ConfigError(
                "strict_address_length must be a bool",
                got=type(self.strict_address_length).__name__,
            )
        if not isinstance(self.signature_chain_id, str) or not _HEX_RE.match(self.signature_chain_id):
            raise ConfigError(
                "signature_chain_id must be a 0x-prefixed hex string",
                value=self.signature_chain_id,
            )
        return self

    def with_overrides(self, **overrides: Any) -> "SigningConfig":
        return replace(self, **overrides).validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load(**overrides: Any) -> SigningConfig:
    """
    Build a SigningConfig from defaults, then environment, then `overrides`.
    Unknown override keys raise ConfigError.
    """
    base = SigningConfig(
        strict_address_length=_env_bool(ENV_STRICT_ADDRESS_LENGTH, True),
        signature_chain_id=_env_str(ENV_SIGNATURE_CHAIN_ID, DEFAULT_SIGNATURE_CHAIN_ID),
    )
    unknown = set(overrides) - set(base.to_dict())
    if unknown:
        raise ConfigError("unknown configuration keys", keys=sorted(unknown))
    return base.with_overrides(**overrides)


# ------------------------------
# Process-wide default
# ------------------------------

_DEFAULT: Optional[SigningConfig] = None


def default_config() -> SigningConfig:
    """Return the process default, loading it from the environment on first use."""
    global _DEFAULT
    cfg = _DEFAULT
    if cfg is None:
        cfg = load()
        _DEFAULT = cfg
    return cfg


def set_default_config(cfg: Optional[SigningConfig]) -> None:
    """Replace the process default. `None` re-reads the environment on next use."""
    global _DEFAULT
    _DEFAULT = cfg.validate() if cfg is not None else None


def set_strict_address_length(strict: bool) -> None:
    set_default_config(default_config().with_overrides(strict_address_length=strict))


def is_strict_address_length() -> bool:
    return default_config().strict_address_length


def resolve(config: Optional[SigningConfig]) -> SigningConfig:
    """Explicit config wins; otherwise fall back to the process default."""
    return config if config is not None else default_config()


__all__ = [
    "DEFAULT_SIGNATURE_CHAIN_ID",
    "ENV_SIGNATURE_CHAIN_ID",
    "ENV_STRICT_ADDRESS_LENGTH",
    "SigningConfig",
    "load",
    "default_config",
    "set_default_config",
    "set_strict_address_length",
    "is_strict_address_length",
    "resolve",
]
