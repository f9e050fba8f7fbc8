"""
Structured logging setup for hlsign.

This module configures **structlog** + the stdlib ``logging`` package so that:
- Library events are emitted as structured JSON by default (or as a pretty
  console renderer in dev).
- Context variables bound by the host application are merged into each event.
- Key material never reaches a sink: a redaction processor masks well-known
  secret keys before rendering.

The signing core itself only emits DEBUG events. Nothing is configured at
import time; applications call `setup_logging()` once at process start, or
leave logging to their own structlog setup.

Quick start
-----------
    from hlsign.logging import setup_logging, get_logger

    setup_logging()
    log = get_logger(__name__)
    log.debug("action_hash.computed", nonce=1700000000000)

Environment
-----------
- LOG_LEVEL: one of DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_FORMAT: "json" (default) or "console"
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, Optional

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import JSONRenderer

# ------------------------------ Redaction ------------------------------------


REDACT_KEYS = {"private_key", "privkey", "secret", "key", "api_key", "seed", "mnemonic"}


def _redact_secrets(_: logging.Logger, __: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Processor that redacts sensitive values for well-known keys.
    """
    for k in list(event_dict.keys()):
        if k.lower() in REDACT_KEYS and event_dict[k] is not None:
            event_dict[k] = "***"
    return event_dict


def _hex_bytes(_: logging.Logger, __: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Render raw bytes (hashes, digests) as 0x-hex instead of Python reprs."""
    for k, v in event_dict.items():
        if isinstance(v, (bytes, bytearray)):
            event_dict[k] = "0x" + bytes(v).hex()
    return event_dict


# ------------------------------ Setup ----------------------------------------


def _base_processors() -> Iterable:
    yield structlog.stdlib.add_log_level
    yield structlog.processors.TimeStamper(fmt="iso", utc=True)
    yield merge_contextvars
    yield structlog.processors.StackInfoRenderer()
    yield structlog.processors.format_exc_info
    yield _redact_secrets
    yield _hex_bytes
    yield structlog.processors.UnicodeDecoder()


def setup_logging(
    *,
    level: Optional[str | int] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Configure structlog + stdlib logging. Safe to call once at process start.

    Parameters
    ----------
    level: str|int
        Log level (e.g., "INFO"). Defaults to $LOG_LEVEL or INFO.
    log_format: str
        "json" (default) or "console". Defaults to $LOG_FORMAT or "json".
    """
    env_level = os.getenv("LOG_LEVEL", "").upper() or None
    env_format = os.getenv("LOG_FORMAT", "").lower() or None

    level = level or env_level or "INFO"
    log_format = (log_format or env_format or "json").lower()

    processors = list(_base_processors())

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False, sort_keys=False)
    else:
        renderer = JSONRenderer(sort_keys=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            *processors,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Return a structlog logger wrapping the stdlib logger `name`.

    Wrapping a stdlib logger (instead of structlog's default PrintLogger) keeps
    an unconfigured host quiet: stdlib level filtering applies until
    `setup_logging()` or the host's own config says otherwise.
    """
    return structlog.wrap_logger(logging.getLogger(name or "hlsign"))


__all__ = [
    "REDACT_KEYS",
    "setup_logging",
    "get_logger",
]
