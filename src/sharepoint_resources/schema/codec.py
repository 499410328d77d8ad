"""Generic JSON decode/encode for Graph resource dataclasses.

Every resource field is declared with ``wire_field()``, which records the
exact wire key and the declared kind in the dataclass field metadata. The
routines below walk those descriptors, so no resource type carries its own
parsing code.

Optional fields are tri-state:

* ``ABSENT`` -- the key was not in the payload (and is omitted on encode).
* ``None`` -- the key was present with a JSON ``null``.
* any other value -- the key was present with that value.
"""

from __future__ import annotations

import copy
import enum
import json
import logging
from collections.abc import Mapping
from dataclasses import Field, field, fields, is_dataclass
from typing import Any, Final, Self, TypeVar

logger = logging.getLogger(__name__)

# Field metadata keys
WIRE_KEY = "wire_key"
WIRE_KIND = "wire_kind"
WIRE_REQUIRED = "wire_required"

# Graph collection responses carry their items under this key
ODATA_VALUE = "value"
ODATA_NEXT_LINK = "@odata.nextLink"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_KIND_NAMES: dict[type, str] = {str: "string", int: "integer", object: "JSON value"}

_TOO_DEEP = "payload nesting too deep"

R = TypeVar("R")


class Absent(enum.Enum):
    """Marker type for a field whose key was not present in the payload."""

    ABSENT = "ABSENT"

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = Absent.ABSENT


class MalformedPayloadError(ValueError):
    """Raised when a payload is not valid JSON or a present value has the wrong shape."""

    def __init__(self, path: str, reason: str) -> None:
        location = f" at '{path}'" if path else ""
        super().__init__(f"Malformed payload{location}: {reason}")
        self.path = path
        self.reason = reason


def wire_field(key: str, kind: type, *, required: bool = False) -> Any:
    """Declare a dataclass field mapped to a JSON key.

    Args:
        key: Exact, case-sensitive JSON key (e.g. "eTag").
        kind: Declared kind of the value: ``str``, ``int``, ``object`` for an
            opaque JSON value kept as given, or a resource dataclass.
        required: Whether the key must be present. Required fields have no
            default and never accept ``null``.

    Returns:
        A ``dataclasses.field`` carrying the wire metadata.
    """
    metadata = {WIRE_KEY: key, WIRE_KIND: kind, WIRE_REQUIRED: required}
    if required:
        return field(metadata=metadata)
    return field(default=ABSENT, metadata=metadata)


def _wire_fields(cls: type) -> tuple[Field[Any], ...]:
    if not (isinstance(cls, type) and is_dataclass(cls)):
        raise TypeError(f"{cls!r} is not a resource dataclass")
    return tuple(f for f in fields(cls) if WIRE_KEY in f.metadata)


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _kind_name(kind: type) -> str:
    return _KIND_NAMES.get(kind, kind.__name__)


def _shape_error(path: str, kind: type, value: Any) -> MalformedPayloadError:
    return MalformedPayloadError(
        path, f"expected {_kind_name(kind)}, got {type(value).__name__}"
    )


def _decode_value(kind: type, value: Any, *, strict: bool, path: str) -> Any:
    if is_dataclass(kind):
        return _decode_object(kind, value, strict=strict, path=path)
    if kind is int:
        # bool is an int subclass in Python but a distinct JSON type.
        if isinstance(value, bool) or not isinstance(value, int):
            raise _shape_error(path, kind, value)
        if not INT64_MIN <= value <= INT64_MAX:
            raise MalformedPayloadError(path, f"integer {value} is out of 64-bit range")
        return value
    if kind is object:
        return copy.deepcopy(value)
    if not isinstance(value, kind):
        raise _shape_error(path, kind, value)
    return value


def _decode_object(cls: type[R], data: Any, *, strict: bool, path: str) -> R:
    if not isinstance(data, Mapping):
        raise MalformedPayloadError(path, f"expected object, got {type(data).__name__}")

    values: dict[str, Any] = {}
    for f in _wire_fields(cls):
        key = f.metadata[WIRE_KEY]
        kind = f.metadata[WIRE_KIND]
        required = f.metadata[WIRE_REQUIRED]
        field_path = _join(path, key)

        if key not in data:
            if required:
                if strict:
                    raise MalformedPayloadError(field_path, "required field is missing")
                # Lenient mode: zero value of the declared kind.
                values[f.name] = kind()
            continue

        value = data[key]
        if value is None:
            if required:
                raise MalformedPayloadError(field_path, "required field is null")
            values[f.name] = None
            continue

        values[f.name] = _decode_value(kind, value, strict=strict, path=field_path)

    return cls(**values)


def _decode_guarded(cls: type[R], data: Any, *, strict: bool, path: str) -> R:
    # Opaque values are deep-copied, which can exhaust the stack before json.loads does.
    try:
        return _decode_object(cls, data, strict=strict, path=path)
    except RecursionError as exc:
        raise MalformedPayloadError(path, _TOO_DEEP) from exc


def decode(cls: type[R], data: Any, *, strict: bool = True) -> R:
    """Decode a JSON object (already parsed) into a resource instance.

    Unknown keys are ignored. Missing optional keys decode to ``ABSENT``.

    Args:
        cls: Resource dataclass to build.
        data: Parsed JSON object.
        strict: When False, missing required fields take the zero value of
            their kind instead of failing.

    Returns:
        A fully populated instance of ``cls``.

    Raises:
        MalformedPayloadError: If ``data`` is not an object, a present value
            has the wrong shape, (strict mode) a required field is missing,
            or an opaque value is nested too deeply to copy.
    """
    try:
        return _decode_guarded(cls, data, strict=strict, path="")
    except MalformedPayloadError as exc:
        logger.debug(
            "[decode] malformed payload; resource:%s;path:%s;reason:%s",
            cls.__name__,
            exc.path,
            exc.reason,
        )
        raise


def _encode_value(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return encode(value)
    if isinstance(value, (dict, list)):
        return copy.deepcopy(value)
    return value


def encode(obj: Any) -> dict[str, Any]:
    """Encode a resource instance to a JSON-ready dict.

    ``ABSENT`` fields are omitted; ``None`` fields are emitted as ``null``.
    """
    out: dict[str, Any] = {}
    for f in _wire_fields(type(obj)):
        value = getattr(obj, f.name)
        if value is ABSENT:
            continue
        out[f.metadata[WIRE_KEY]] = _encode_value(value)
    return out


def _reject_constant(name: str) -> Any:
    raise MalformedPayloadError("", f"invalid JSON (non-finite number {name})")


def parse_object(raw: str | bytes | bytearray) -> dict[str, Any]:
    """Parse raw JSON text into a dict.

    Raises:
        MalformedPayloadError: If the text is not valid JSON (including the
            NaN and Infinity literals Python would otherwise accept), is
            nested too deeply, or its top level is not an object.
    """
    try:
        data = json.loads(raw, parse_constant=_reject_constant)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedPayloadError("", f"invalid JSON ({exc})") from exc
    except RecursionError as exc:
        raise MalformedPayloadError("", _TOO_DEEP) from exc
    if not isinstance(data, dict):
        raise MalformedPayloadError("", f"expected object, got {type(data).__name__}")
    return data


def loads(cls: type[R], raw: str | bytes | bytearray, *, strict: bool = True) -> R:
    """Parse raw JSON text and decode it into ``cls``."""
    return decode(cls, parse_object(raw), strict=strict)


def dumps(obj: Any, **json_kwargs: Any) -> str:
    """Encode a resource instance to JSON text.

    Non-finite floats are refused unless ``allow_nan=True`` is passed.
    """
    json_kwargs.setdefault("allow_nan", False)
    return json.dumps(encode(obj), **json_kwargs)


def decode_collection(cls: type[R], data: Any, *, strict: bool = True) -> list[R]:
    """Decode the ``value`` array of a Graph collection response.

    A response without ``value`` decodes to an empty list. Paging links are
    not followed here.

    Raises:
        MalformedPayloadError: If the response or ``value`` has the wrong
            shape, or any element fails to decode.
    """
    if not isinstance(data, Mapping):
        raise MalformedPayloadError("", f"expected object, got {type(data).__name__}")
    raw_items = data.get(ODATA_VALUE)
    if raw_items is None:
        return []
    if not isinstance(raw_items, list):
        raise MalformedPayloadError(
            ODATA_VALUE, f"expected array, got {type(raw_items).__name__}"
        )
    return [
        _decode_guarded(cls, raw, strict=strict, path=f"{ODATA_VALUE}[{index}]")
        for index, raw in enumerate(raw_items)
    ]


def present_fields(obj: Any) -> set[str]:
    """Return the wire keys of every field on ``obj`` that is not ``ABSENT``."""
    return {
        f.metadata[WIRE_KEY]
        for f in _wire_fields(type(obj))
        if getattr(obj, f.name) is not ABSENT
    }


def is_set(value: Any) -> bool:
    """Return True if a field value is present and not ``null``."""
    return value is not ABSENT and value is not None


class GraphResource:
    """Mixin giving a resource dataclass its decode/encode entry points."""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, strict: bool = True) -> Self:
        return decode(cls, data, strict=strict)

    @classmethod
    def from_json(cls, raw: str | bytes | bytearray, *, strict: bool = True) -> Self:
        return loads(cls, raw, strict=strict)

    def to_dict(self) -> dict[str, Any]:
        return encode(self)

    def to_json(self, **json_kwargs: Any) -> str:
        return dumps(self, **json_kwargs)

