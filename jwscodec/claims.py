"""Registered JWT claim set."""

from __future__ import annotations

from typing import Annotated, ClassVar, Optional, Tuple

from pydantic import Field, StrictStr

from .fieldbag import FieldBag

# Seconds since the epoch. Stored as given; nothing here compares them to the clock.
NumericDate = Annotated[int, Field(strict=True, ge=0)]


class Claims(FieldBag):
    """JWT claims: the seven registered claims plus arbitrary extensions."""

    RESERVED: ClassVar[Tuple[str, ...]] = ("iss", "sub", "aud", "exp", "nbf", "iat", "jti")

    iss: Optional[StrictStr] = None
    sub: Optional[StrictStr] = None
    aud: Optional[StrictStr] = None
    exp: Optional[NumericDate] = None
    nbf: Optional[NumericDate] = None
    iat: Optional[NumericDate] = None
    jti: Optional[StrictStr] = None
