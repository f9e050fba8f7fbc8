"""
Shared pytest fixtures:
- A fixed secp256k1 test key (the well-known 0x0123...0123 vector key)
- Process-default SigningConfig reset around every test
- structlog/stdlib logging reset for tests that call setup_logging()
"""
from __future__ import annotations

import logging

import pytest
import structlog

from hlsign import config

TEST_PRIVATE_KEY = "0x0123456789012345678901234567890123456789012345678901234567890123"


@pytest.fixture(autouse=True)
def _fresh_default_config(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(config.ENV_STRICT_ADDRESS_LENGTH, raising=False)
    monkeypatch.delenv(config.ENV_SIGNATURE_CHAIN_ID, raising=False)
    config.set_default_config(None)
    yield
    config.set_default_config(None)


@pytest.fixture
def private_key() -> str:
    return TEST_PRIVATE_KEY


@pytest.fixture
def reset_logging():
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(logging.WARNING)
