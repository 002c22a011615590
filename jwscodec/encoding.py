"""Base64url and JSON helpers for compact token segments."""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any, Union

from .errors import Base64DecodeError, JsonParseError, SerializationError, Utf8DecodeError

_B64URL_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def b64url_encode(data: bytes) -> str:
    """Encode ``data`` as unpadded URL-safe base64."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(data: Union[str, bytes]) -> bytes:
    """Decode an unpadded URL-safe base64 segment.

    Only the canonical encoding of a byte string is accepted: padding,
    characters outside the URL-safe alphabet and stray trailing bits are all
    rejected with :class:`Base64DecodeError`.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("ascii")
        except UnicodeDecodeError as exc:
            raise Base64DecodeError("Segment contains non-ASCII bytes") from exc

    if not _B64URL_ALPHABET.fullmatch(data):
        raise Base64DecodeError("Segment contains characters outside the base64url alphabet")
    if len(data) % 4 == 1:
        raise Base64DecodeError("Segment has an impossible base64 length")

    try:
        raw = base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))
    except (binascii.Error, ValueError) as exc:
        raise Base64DecodeError(f"Segment is not valid base64url: {exc}") from exc

    if b64url_encode(raw) != data:
        raise Base64DecodeError("Segment is not canonically encoded")
    return raw


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def json_dumps(obj: Any) -> bytes:
    """Serialize ``obj`` to compact UTF-8 JSON, preserving key order."""
    try:
        return json.dumps(
            obj, separators=(",", ":"), ensure_ascii=False, allow_nan=False
        ).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Value cannot be serialized to JSON: {exc}") from exc


def json_loads(raw: bytes) -> Any:
    """Parse UTF-8 encoded JSON bytes."""
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise Utf8DecodeError(f"Segment is not valid UTF-8: {exc}") from exc
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise JsonParseError(f"Segment is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise JsonParseError("Segment is nested too deeply") from exc


__all__ = ["b64url_encode", "b64url_decode", "json_dumps", "json_loads"]
