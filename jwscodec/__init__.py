"""jwscodec: compact JSON Web Signatures with typed headers and claims."""

from .claims import Claims
from .errors import (
    AlgorithmMismatchError,
    Base64DecodeError,
    DecodeError,
    FieldTypeError,
    InvalidSignatureError,
    JsonParseError,
    JWSError,
    KeyParseError,
    MalformedTokenError,
    MissingRequiredFieldError,
    SerializationError,
    UnsupportedAlgorithmError,
    Utf8DecodeError,
)
from .fieldbag import FieldBag
from .header import Algorithm, Header
from .jws import JWS, ClaimsBody, OpaqueBody, decode, encode, peek_header
from .signing import SignatureProvider

__version__ = "0.1.0"
__all__ = [
    "Algorithm",
    "Claims",
    "ClaimsBody",
    "FieldBag",
    "Header",
    "JWS",
    "OpaqueBody",
    "SignatureProvider",
    "decode",
    "encode",
    "peek_header",
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
