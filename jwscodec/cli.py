"""Command line interface for encoding, verifying and inspecting tokens."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from jwscodec.claims import Claims
from jwscodec.config import JWSConfig, load_config
from jwscodec.encoding import json_loads
from jwscodec.errors import JWSError
from jwscodec.header import Algorithm, Header
from jwscodec.jws import JWS, peek_header

app = typer.Typer(help="CLI for compact JWS tokens")


def _config(ctx: typer.Context) -> JWSConfig:
    return ctx.obj if isinstance(ctx.obj, JWSConfig) else load_config()


def _fail(exc: Exception) -> None:
    code = getattr(exc, "code", type(exc).__name__)
    typer.secho(f"{code}: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _read_key(path: Optional[Path], fallback) -> bytes:
    if path is not None:
        return path.expanduser().read_bytes()
    return fallback()


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, help="Path to a jwscodec YAML config file"),
    log_level: Optional[str] = typer.Option(None, help="Logging level (default from config)"),
) -> None:
    """jwscodec CLI entry point."""
    try:
        cfg = load_config(str(config) if config else None)
    except (JWSError, ValidationError, yaml.YAMLError, TypeError, OSError) as exc:
        _fail(exc)
        return
    logging.basicConfig(level=(log_level or cfg.log_level).upper())
    ctx.obj = cfg


@app.command("encode")
def encode_command(
    ctx: typer.Context,
    claims: str = typer.Option("{}", help="Claims as a JSON object"),
    header: str = typer.Option("{}", help="Additional header members as a JSON object"),
    raw: Optional[str] = typer.Option(None, help="Sign this text as an opaque body instead of claims"),
    alg: Optional[str] = typer.Option(None, help="Signing algorithm (default from config)"),
    key_file: Optional[Path] = typer.Option(None, help="HMAC secret or PEM private key file"),
) -> None:
    """
    Sign claims (or raw text) and print the compact token.

    Example:
        jwscodec encode --claims '{"iss": "svc-a", "exp": 2000000000}' --key-file secret.key
    """
    cfg = _config(ctx)
    try:
        algorithm = Algorithm.parse(alg) if alg else cfg.algorithm
        key = _read_key(key_file, cfg.signing_key)
        header_data = dict(json_loads(header.encode("utf-8")))
        header_data["alg"] = algorithm.value
        token_header = Header.from_dict(header_data)
        if raw is not None:
            token = JWS.from_custom(token_header, raw.encode("utf-8"))
        else:
            token = JWS.from_claims(token_header, Claims.from_json(claims))
        typer.echo(token.encode(key, algorithm))
    except (JWSError, ValueError, TypeError, OSError) as exc:
        _fail(exc)


@app.command("decode")
def decode_command(
    ctx: typer.Context,
    token: str,
    alg: Optional[str] = typer.Option(None, help="Expected algorithm (default from config)"),
    key_file: Optional[Path] = typer.Option(None, help="HMAC secret or PEM key file"),
    raw: bool = typer.Option(False, help="Print the body as text instead of parsing claims"),
) -> None:
    """
    Verify a token and print its header and body.

    Exits with code 1 and the error code when verification fails.

    Example:
        jwscodec decode eyJhbGciOi... --alg HS256 --key-file secret.key
    """
    cfg = _config(ctx)
    try:
        algorithm = Algorithm.parse(alg) if alg else cfg.algorithm
        key = _read_key(key_file, cfg.verification_key)
        decode_claims = cfg.decode_claims and not raw
        decoded = JWS.decode(token.strip(), key, algorithm, decode_claims=decode_claims)
    except (JWSError, ValueError, OSError) as exc:
        _fail(exc)
        return

    if decoded.claims is not None:
        _echo_json({"header": decoded.header.to_dict(), "claims": decoded.claims.to_dict()})
    else:
        _echo_json({"header": decoded.header.to_dict()})
        typer.echo(decoded.payload.decode("utf-8", errors="replace"))


@app.command("inspect")
def inspect_command(token: str) -> None:
    """Print a token's header without verifying the signature."""
    try:
        header = peek_header(token.strip())
    except JWSError as exc:
        _fail(exc)
        return
    typer.echo("Header (UNVERIFIED):")
    _echo_json(header.to_dict())
