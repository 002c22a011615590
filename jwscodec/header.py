"""JOSE header model and the algorithm identifiers it can declare."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Optional, Tuple

from pydantic import StrictStr, ValidationError

from .errors import JWSError, UnsupportedAlgorithmError
from .fieldbag import FieldBag


class Algorithm(str, Enum):
    """Signature algorithms a header may declare.

    Only the HMAC and RSA families can sign and verify; the ES* identifiers
    are recognised in headers but rejected by the signature provider.
    """

    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"

    @property
    def family(self) -> str:
        return self.value[:2]

    @property
    def digest_bits(self) -> int:
        return int(self.value[2:])

    @property
    def is_hmac(self) -> bool:
        return self.family == "HS"

    @property
    def is_rsa(self) -> bool:
        return self.family == "RS"

    @property
    def is_supported(self) -> bool:
        return self.is_hmac or self.is_rsa

    @classmethod
    def parse(cls, value: "Algorithm | str") -> "Algorithm":
        """Return the member for ``value``, raising for unknown identifiers."""
        try:
            return cls(value)
        except ValueError as exc:
            raise UnsupportedAlgorithmError(value) from exc


class Header(FieldBag):
    """JOSE header: ``alg`` plus optional type and key hints."""

    RESERVED: ClassVar[Tuple[str, ...]] = ("alg", "typ", "jku", "kid", "x5u", "x5t")

    alg: Algorithm
    typ: Optional[StrictStr] = None
    jku: Optional[StrictStr] = None
    kid: Optional[StrictStr] = None
    x5u: Optional[StrictStr] = None
    x5t: Optional[StrictStr] = None

    @classmethod
    def _translate_validation_error(cls, exc: ValidationError) -> JWSError:
        for error in exc.errors():
            if error.get("loc") == ("alg",) and isinstance(error.get("input"), str):
                return UnsupportedAlgorithmError(error["input"])
        return super()._translate_validation_error(exc)
