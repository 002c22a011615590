"""Reserved/extension field container shared by headers and claim sets."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from pydantic_core import PydanticSerializationError, to_jsonable_python

from .encoding import json_dumps, json_loads
from .errors import FieldTypeError, JsonParseError, JWSError, MissingRequiredFieldError, SerializationError

logger = logging.getLogger(__name__)

BagT = TypeVar("BagT", bound="FieldBag")

_MISSING = object()


@lru_cache(maxsize=128)
def _adapter(type_: Any) -> TypeAdapter:
    return TypeAdapter(type_)


def _jsonable(name: str, value: Any) -> Any:
    try:
        return to_jsonable_python(value)
    except PydanticSerializationError as exc:
        raise SerializationError(f"Field {name!r} is not JSON serializable: {exc}") from exc


class FieldBag(BaseModel):
    """Typed reserved fields plus an open bag of extension fields.

    Subclasses declare their reserved members as pydantic fields and list
    them in ``RESERVED`` in canonical output order. Anything else is an
    extension field kept in ``extensions``. A reserved name can never be
    stored as an extension: :meth:`set` ignores it silently, and so does
    construction through ``extensions=``.

    Output order is fixed so identical content always serializes to identical
    bytes: reserved fields in ``RESERVED`` order (only when set), followed by
    extension fields sorted by name.

    Assigning a reserved field directly is validated like construction and
    raises pydantic's ``ValidationError`` on a value of the wrong type.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    RESERVED: ClassVar[Tuple[str, ...]] = ()

    extensions: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("extensions")
    @classmethod
    def _drop_reserved(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        return {
            name: to_jsonable_python(item)
            for name, item in value.items()
            if name not in cls.RESERVED
        }

    def set(self, name: str, value: Any) -> None:
        """Store ``value`` under extension ``name``; reserved names are ignored."""
        if name in self.RESERVED:
            return
        self.extensions[name] = _jsonable(name, value)

    def get(self, name: str, type_: Any = None, default: Any = None) -> Any:
        """Return extension ``name``, optionally read as ``type_``.

        A missing field and a value that cannot be read as ``type_`` both
        yield ``default``. Use :meth:`require` to tell the two apart.
        """
        value = self.extensions.get(name, _MISSING)
        if value is _MISSING:
            return default
        if type_ is None:
            return value
        try:
            return _adapter(type_).validate_python(value, strict=True)
        except ValidationError:
            return default

    def require(self, name: str, type_: Any = None) -> Any:
        """Return extension ``name`` read as ``type_``.

        Raises:
            KeyError: If no extension field ``name`` is set.
            FieldTypeError: If the stored value cannot be read as ``type_``.
        """
        if name not in self.extensions:
            raise KeyError(name)
        value = self.extensions[name]
        if type_ is None:
            return value
        try:
            return _adapter(type_).validate_python(value, strict=True)
        except ValidationError as exc:
            raise FieldTypeError(name, type_) from exc

    def unset(self, name: str) -> None:
        """Remove extension ``name`` if present."""
        self.extensions.pop(name, None)

    def extension_names(self) -> List[str]:
        return sorted(self.extensions)

    def __contains__(self, name: object) -> bool:
        return name in self.extensions

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON object in canonical member order."""
        dumped = self.model_dump(mode="json", exclude={"extensions"}, exclude_none=True)
        data: Dict[str, Any] = {name: dumped[name] for name in self.RESERVED if name in dumped}
        for name in sorted(self.extensions):
            data[name] = self.extensions[name]
        return data

    def to_json(self) -> bytes:
        """Serialize to compact UTF-8 JSON bytes."""
        return json_dumps(self.to_dict())

    @classmethod
    def from_dict(cls: Type[BagT], data: Mapping[str, Any]) -> BagT:
        """Build from a decoded JSON object; unknown members become extensions."""
        if not isinstance(data, Mapping):
            raise JsonParseError(f"{cls.__name__} must be a JSON object")
        reserved = {name: value for name, value in data.items() if name in cls.RESERVED}
        extensions = {name: value for name, value in data.items() if name not in cls.RESERVED}
        try:
            return cls(**reserved, extensions=extensions)
        except ValidationError as exc:
            raise cls._translate_validation_error(exc) from exc

    @classmethod
    def from_json(cls: Type[BagT], raw: Union[bytes, str]) -> BagT:
        if isinstance(raw, str):
            raw = raw.encode("utf-8")
        return cls.from_dict(json_loads(raw))

    @classmethod
    def _translate_validation_error(cls, exc: ValidationError) -> JWSError:
        first = exc.errors()[0]
        field: Optional[str] = str(first["loc"][0]) if first.get("loc") else None
        if first.get("type") == "missing" and field is not None:
            return MissingRequiredFieldError(field)
        logger.debug(f"{cls.__name__} member {field!r} failed validation: {first.get('type')}")
        return JsonParseError(
            f"{cls.__name__} member {field!r} has an invalid value",
            {"field": field, "error": first.get("msg")},
        )
