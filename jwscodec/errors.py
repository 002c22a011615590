"""Error types raised while encoding and decoding compact JWS tokens."""

from __future__ import annotations

from typing import Any, Dict, Optional


class JWSError(Exception):
    """Base exception for jwscodec."""

    code = "JWS_ERROR"
    default_message = "JWS processing failed"

    def __init__(
        self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Return the error as a ``code``/``message``/``details`` mapping."""
        return {"code": self.code, "message": self.message, "details": self.details}


class DecodeError(JWSError):
    """A token could not be read back into a header and body."""

    code = "DECODE_ERROR"
    default_message = "Token could not be decoded"


class MalformedTokenError(DecodeError):
    code = "MALFORMED_COMPACT_STRING"
    default_message = "Token must have exactly three dot-separated segments"


class Base64DecodeError(DecodeError):
    code = "BASE64_DECODE_ERROR"
    default_message = "Segment is not valid unpadded base64url"


class Utf8DecodeError(DecodeError):
    code = "UTF8_DECODE_ERROR"
    default_message = "Segment is not valid UTF-8"


class JsonParseError(DecodeError):
    code = "JSON_PARSE_ERROR"
    default_message = "Segment is not a valid JSON object"


class MissingRequiredFieldError(DecodeError):
    code = "MISSING_REQUIRED_FIELD"

    def __init__(self, field: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.field = field
        super().__init__(f"Missing required field: {field}", {"field": field, **(details or {})})


class UnsupportedAlgorithmError(JWSError):
    code = "UNSUPPORTED_ALGORITHM"

    def __init__(self, algorithm: Any, details: Optional[Dict[str, Any]] = None) -> None:
        self.algorithm = getattr(algorithm, "value", algorithm)
        super().__init__(
            f"Unsupported algorithm: {self.algorithm}",
            {"algorithm": self.algorithm, **(details or {})},
        )


class AlgorithmMismatchError(JWSError):
    """The signing algorithm differs from the one declared in the header."""

    code = "ALGORITHM_MISMATCH"

    def __init__(self, declared: Any, requested: Any) -> None:
        declared = getattr(declared, "value", declared)
        requested = getattr(requested, "value", requested)
        super().__init__(
            f"Header declares {declared} but signing was requested with {requested}",
            {"declared": declared, "requested": requested},
        )


class SerializationError(JWSError):
    code = "SERIALIZATION_ERROR"
    default_message = "Value cannot be serialized to JSON"


class KeyParseError(JWSError):
    code = "KEY_PARSE_ERROR"
    default_message = "Key material could not be loaded"


class InvalidSignatureError(JWSError):
    """Signature did not verify under the expected algorithm and key.

    Raised for a wrong algorithm, a bad MAC, a bad RSA signature or an
    unreadable signature segment alike.
    """

    code = "INVALID_SIGNATURE"
    default_message = "The signature is invalid"


class FieldTypeError(JWSError):
    """An extension field is present but not of the requested type."""

    code = "FIELD_TYPE_ERROR"

    def __init__(self, name: str, expected: Any) -> None:
        self.name = name
        expected_name = getattr(expected, "__name__", repr(expected))
        super().__init__(
            f"Field {name!r} cannot be read as {expected_name}",
            {"field": name, "expected": expected_name},
        )


__all__ = [
    "JWSError",
    "DecodeError",
    "MalformedTokenError",
    "Base64DecodeError",
    "Utf8DecodeError",
    "JsonParseError",
    "MissingRequiredFieldError",
    "UnsupportedAlgorithmError",
    "AlgorithmMismatchError",
    "KeyParseError",
    "SerializationError",
    "InvalidSignatureError",
    "FieldTypeError",
]
