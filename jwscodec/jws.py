"""Compact JWS tokens: construction, encoding and verified decoding."""

from __future__ import annotations

import logging
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .claims import Claims
from .encoding import b64url_decode, b64url_encode, json_loads
from .errors import (
    AlgorithmMismatchError,
    Base64DecodeError,
    InvalidSignatureError,
    JWSError,
    MalformedTokenError,
)
from .header import Algorithm, Header
from .signing import KeyMaterial, SignatureProvider, default_provider

logger = logging.getLogger(__name__)

JWT_TYPE = "JWT"


class ClaimsBody(BaseModel):
    """Body holding a JSON claim set; the token is then a JWT."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["claims"] = "claims"
    claims: Claims


class OpaqueBody(BaseModel):
    """Body holding caller supplied bytes, signed as-is."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["opaque"] = "opaque"
    value: bytes
    typ: Optional[str] = None


Body = Union[ClaimsBody, OpaqueBody]


def _split(token: Union[str, bytes]) -> list[str]:
    if isinstance(token, bytes):
        try:
            token = token.decode("ascii")
        except UnicodeDecodeError as exc:
            raise MalformedTokenError("Token contains non-ASCII bytes") from exc
    elif not token.isascii():
        raise MalformedTokenError("Token contains non-ASCII characters")
    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedTokenError(
            f"Token must have exactly three dot-separated segments, got {len(parts)}",
            {"segments": len(parts)},
        )
    return parts


def peek_header(token: Union[str, bytes]) -> Header:
    """Parse the header of ``token`` WITHOUT verifying its signature.

    Useful for choosing a key by ``kid``. Nothing read here may be trusted
    until :meth:`JWS.decode` has verified the token.
    """
    header_segment = _split(token)[0]
    return Header.from_json(b64url_decode(header_segment))


class JWS(BaseModel):
    """A header and body pair that can be signed into compact form.

    Instances are immutable. The constructors take deep copies of the header
    and claims they are given, and the ``header``, ``body`` and ``claims``
    accessors hand out copies, so editing what they return never changes
    what the token signs. Build a new token to change its contents.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    signed_header: Header = Field(alias="header")
    signed_body: Body = Field(alias="body", discriminator="kind")

    @classmethod
    def from_claims(cls, header: Header, claims: Claims) -> "JWS":
        return cls(
            header=header.model_copy(deep=True),
            body=ClaimsBody(claims=claims.model_copy(deep=True)),
        )

    @classmethod
    def from_custom(cls, header: Header, value: bytes) -> "JWS":
        """Build a token with an opaque body; its ``typ`` comes from ``header``."""
        return cls(
            header=header.model_copy(deep=True),
            body=OpaqueBody(value=bytes(value), typ=header.typ),
        )

    @property
    def header(self) -> Header:
        """Copy of the header as given to the constructor."""
        return self.signed_header.model_copy(deep=True)

    @property
    def body(self) -> Body:
        return self.signed_body.model_copy(deep=True)

    @property
    def is_jwt(self) -> bool:
        return isinstance(self.signed_body, ClaimsBody)

    @property
    def claims(self) -> Optional[Claims]:
        """Copy of the claim set of a JWT body, ``None`` for opaque bodies."""
        if isinstance(self.signed_body, ClaimsBody):
            return self.signed_body.claims.model_copy(deep=True)
        return None

    @property
    def payload(self) -> bytes:
        """Body bytes exactly as they are signed."""
        if isinstance(self.signed_body, ClaimsBody):
            return self.signed_body.claims.to_json()
        return self.signed_body.value

    @property
    def typ(self) -> Optional[str]:
        """Header ``typ`` written on encode: ``JWT`` for claim sets, else the body's own."""
        if isinstance(self.signed_body, ClaimsBody):
            return JWT_TYPE
        return self.signed_body.typ

    def _final_header(self) -> Header:
        return self.signed_header.model_copy(update={"typ": self.typ}, deep=True)

    def signing_input(self) -> str:
        """Return ``base64url(header) + "." + base64url(body)``."""
        header_segment = b64url_encode(self._final_header().to_json())
        return f"{header_segment}.{b64url_encode(self.payload)}"

    def encode(
        self,
        key: KeyMaterial,
        algorithm: Optional[Algorithm] = None,
        provider: Optional[SignatureProvider] = None,
    ) -> str:
        """Serialize and sign the token into its compact form.

        ``algorithm`` defaults to the header's ``alg``. Passing a different
        algorithm raises :class:`AlgorithmMismatchError` instead of producing
        a token whose header misstates how it was signed.
        """
        provider = provider or default_provider
        algorithm = Algorithm.parse(algorithm) if algorithm is not None else self.signed_header.alg
        if algorithm != self.signed_header.alg:
            raise AlgorithmMismatchError(self.signed_header.alg, algorithm)

        signing_input = self.signing_input()
        signature = provider.sign(algorithm, key, signing_input.encode("ascii"))
        logger.debug(
            f"Encoded token alg={algorithm.value} typ={self.typ} kid={self.signed_header.kid}"
        )
        return f"{signing_input}.{b64url_encode(signature)}"

    @classmethod
    def decode(
        cls,
        token: Union[str, bytes],
        key: KeyMaterial,
        algorithm: Algorithm,
        decode_claims: bool = True,
        provider: Optional[SignatureProvider] = None,
    ) -> "JWS":
        """Verify ``token`` and rebuild it.

        The signature is checked with ``algorithm`` as supplied by the caller;
        the header's own ``alg`` must agree with it. Any signature failure,
        including an algorithm disagreement or an unreadable signature
        segment, raises :class:`InvalidSignatureError`. The body is only
        decoded after the signature has verified.

        Raises:
            MalformedTokenError: If the token is not ASCII or does not have
                three segments.
            DecodeError: If the header or body cannot be decoded.
            InvalidSignatureError: If the signature does not verify.
            KeyParseError: If RSA key material cannot be loaded.
        """
        provider = provider or default_provider
        algorithm = Algorithm.parse(algorithm)
        try:
            header_segment, body_segment, signature_segment = _split(token)
            header = Header.from_json(b64url_decode(header_segment))

            if header.alg != algorithm:
                raise InvalidSignatureError()
            try:
                signature = b64url_decode(signature_segment)
            except Base64DecodeError as exc:
                raise InvalidSignatureError() from exc
            signing_input = f"{header_segment}.{body_segment}".encode("ascii")
            if not provider.verify(algorithm, key, signature, signing_input):
                raise InvalidSignatureError()

            body = b64url_decode(body_segment)
            if decode_claims:
                token_obj = cls.from_claims(header, Claims.from_dict(json_loads(body)))
            else:
                token_obj = cls.from_custom(header, body)
        except JWSError as exc:
            logger.info(f"Rejected token: {exc.code}")
            raise

        logger.debug(f"Decoded token alg={algorithm.value} typ={header.typ} kid={header.kid}")
        return token_obj

    @classmethod
    def decode_jwt(cls, token: Union[str, bytes], key: KeyMaterial, algorithm: Algorithm) -> "JWS":
        """Decode ``token`` with a JSON claim set body."""
        return cls.decode(token, key, algorithm, decode_claims=True)


def encode(token: JWS, key: KeyMaterial, algorithm: Optional[Algorithm] = None) -> str:
    """Encode ``token`` with the default signature provider."""
    return token.encode(key, algorithm)


def decode(
    token: Union[str, bytes], key: KeyMaterial, algorithm: Algorithm, decode_claims: bool = True
) -> JWS:
    """Verify and decode ``token`` with the default signature provider."""
    return JWS.decode(token, key, algorithm, decode_claims=decode_claims)


__all__ = [
    "Body",
    "ClaimsBody",
    "JWS",
    "JWT_TYPE",
    "OpaqueBody",
    "decode",
    "encode",
    "peek_header",
]
