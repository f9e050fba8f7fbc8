"""
hlsign.cli
==========

Command-line access to the signing core.

    hlsign action-hash '{"type":"cancel","cancels":[{"a":1,"o":2}]}' --nonce 1700000000000
    HLSIGN_PRIVATE_KEY=0x... hlsign sign-l1 @order.json --nonce 1700000000000 --testnet
    hlsign recover 0x<digest> --r 0x... --s 0x... --v 27
    HLSIGN_PRIVATE_KEY=0x... hlsign address

ACTION is inline JSON or ``@path`` to read it from a file. Key order in the
JSON is preserved and therefore hashed as written.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from . import __version__
from .errors import HlSignError
from .logging import setup_logging
from .signing.action_hash import compute_action_hash
from .signing.flows import build_exchange_payload, sign_l1_action
from .signing.recover import recover as recover_address
from .signing.signer import address_of
from .types.signature import Signature
from .utils.bytes import from_hex, to_hex

ENV_PRIVATE_KEY = "HLSIGN_PRIVATE_KEY"

app = typer.Typer(
    name="hlsign",
    help="Hash, sign and recover exchange actions",
    no_args_is_help=True,
    add_completion=False,
)


def _fail(msg: str) -> None:
    typer.echo(msg.rstrip(), err=True)
    raise typer.Exit(1)


def _load_action(arg: str) -> Dict[str, Any]:
    if arg.startswith("@"):
        path = Path(arg[1:])
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            _fail(f"cannot read {path}: {e}")
    else:
        text = arg
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        _fail(f"ACTION is not valid JSON: {e}")
    if not isinstance(obj, dict):
        _fail("ACTION must be a JSON object")
    return obj


def _private_key() -> str:
    key = os.environ.get(ENV_PRIVATE_KEY, "").strip()
    if not key:
        _fail(f"${ENV_PRIVATE_KEY} is not set")
    return key


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"hlsign {__version__}")
        raise typer.Exit(0)


@app.callback()
def _meta(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Print version and exit",
        callback=_print_version,
        is_eager=True,
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Enable structured logs on stderr at this level"
    ),
) -> None:
    if log_level:
        setup_logging(level=log_level.upper())


@app.command("action-hash")
def action_hash_cmd(
    action: str = typer.Argument(..., help="Action JSON, or @path to a JSON file"),
    nonce: int = typer.Option(0, "--nonce", help="Nonce (milliseconds timestamp)"),
    vault: Optional[str] = typer.Option(None, "--vault", help="Vault / sub-account address"),
    expires_after: Optional[int] = typer.Option(None, "--expires-after", help="Expiry timestamp (ms)"),
) -> None:
    """Print the keccak256 action hash as 0x-hex."""
    obj = _load_action(action)
    try:
        digest = compute_action_hash(obj, nonce, vault, expires_after)
    except HlSignError as e:
        _fail(str(e))
    typer.echo(to_hex(digest))


@app.command("sign-l1")
def sign_l1_cmd(
    action: str = typer.Argument(..., help="Action JSON, or @path to a JSON file"),
    nonce: int = typer.Option(..., "--nonce", help="Nonce (milliseconds timestamp)"),
    vault: Optional[str] = typer.Option(None, "--vault", help="Vault / sub-account address"),
    expires_after: Optional[int] = typer.Option(None, "--expires-after", help="Expiry timestamp (ms)"),
    testnet: bool = typer.Option(False, "--testnet", help="Sign for testnet (phantom agent source 'b')"),
) -> None:
    """Sign an L1 action with $HLSIGN_PRIVATE_KEY and print the exchange payload."""
    obj = _load_action(action)
    key = _private_key()
    try:
        sig = sign_l1_action(key, obj, vault, nonce, expires_after, not testnet)
        payload = build_exchange_payload(obj, nonce, sig, vault, expires_after)
    except HlSignError as e:
        _fail(str(e))
    typer.echo(json.dumps(payload, separators=(",", ":")))


@app.command("recover")
def recover_cmd(
    digest: str = typer.Argument(..., help="32-byte digest as 0x-hex"),
    r: str = typer.Option(..., "--r", help="Signature r (hex)"),
    s: str = typer.Option(..., "--s", help="Signature s (hex)"),
    v: int = typer.Option(..., "--v", help="Signature v (27/28, 0/1 or EIP-155)"),
) -> None:
    """Print the address that produced (r, s, v) over DIGEST."""
    try:
        sig = Signature.from_dict({"r": r, "s": s, "v": v})
        address = recover_address(from_hex(digest, name="digest"), sig)
    except HlSignError as e:
        _fail(str(e))
    typer.echo(address)


@app.command("address")
def address_cmd() -> None:
    """Print the address for $HLSIGN_PRIVATE_KEY."""
    key = _private_key()
    try:
        address = address_of(key)
    except HlSignError as e:
        _fail(str(e))
    typer.echo(address)


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
