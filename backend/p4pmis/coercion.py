"""
P4P MIS Backend — Field Coercion
==================================

What:  Declarative coercion of raw MongoDB documents into response-ready dicts.
How:   Two steps, always in this order:
       1. `to_jsonable()` converts BSON-specific values (ObjectId, Decimal128,
          Binary) into JSON-safe primitives; NaN/Infinity become null and
          datetimes become ISO-8601 strings with a UTC offset.
       2. `apply_schema()` forces the fields named in a schema to a target
          type, falling back to the field's default when the raw value is
          absent or invalid.
Who:   Used by the services; schemas live in `p4pmis.models.records`.

Coercion Rules:
    string:  missing / None / ""      → default ("")
             True / False             → "true" / "false"
             12.0                     → "12"
             anything else            → str(value)
    number:  missing / None           → default (0)
             True / False             → 1 / 0
             int                      → unchanged
             finite float             → unchanged
             " 42 " / "0x1A" / "2.5"  → 42 / 26 / 2.5
             NaN, inf, "abc", [..]    → default (0)
"""

import base64
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Mapping, Union

from bson import Binary, Decimal128, ObjectId
from fastapi.encoders import jsonable_encoder

Number = Union[int, float]

_RADIX_PREFIXES = ("0x", "0o", "0b")

# BSON types FastAPI's encoder does not know about
_BSON_ENCODERS: Dict[Any, Callable[[Any], Any]] = {
    ObjectId: str,
    Decimal128: lambda value: float(value.to_decimal()),
    Binary: lambda value: base64.b64encode(bytes(value)).decode("ascii"),
    # JSON has no NaN/Infinity; serialize them as null
    float: lambda value: value if math.isfinite(value) else None,
    # BSON dates are UTC; naive values get an explicit offset
    datetime: lambda value: (
        value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    ).isoformat(),
}


def to_jsonable(document: Any) -> Any:
    """Convert a raw document (or list of documents) into JSON-safe values."""
    return jsonable_encoder(document, custom_encoder=_BSON_ENCODERS)


def coerce_string(value: Any, default: str = "") -> str:
    """Force a raw value to a string, using `default` for absent/empty values."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _parse_numeric_string(text: str) -> Union[Number, None]:
    text = text.strip()
    if not text:
        return 0
    # int() would accept "1_000"
    if "_" in text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    unsigned = text.lstrip("+-")
    if unsigned[:2].lower() in _RADIX_PREFIXES:
        if unsigned != text:
            return None
        try:
            return int(text, 0)
        except ValueError:
            return None
    try:
        return float(text)
    except ValueError:
        return None


def coerce_number(value: Any, default: Number = 0) -> Number:
    """Force a raw value to a number, using `default` when it isn't numeric."""
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else default
    if isinstance(value, str):
        parsed = _parse_numeric_string(value)
        if parsed is None:
            return default
        if isinstance(parsed, float) and not math.isfinite(parsed):
            return default
        return parsed
    return default


@dataclass(frozen=True)
class FieldSpec:
    """One entry of a coercion schema: field name, converter and default."""

    name: str
    coerce: Callable[[Any, Any], Any]
    default: Any

    def apply(self, document: Mapping[str, Any]) -> Any:
        return self.coerce(document.get(self.name), self.default)


def string_field(name: str, default: str = "") -> FieldSpec:
    return FieldSpec(name=name, coerce=coerce_string, default=default)


def number_field(name: str, default: Number = 0) -> FieldSpec:
    return FieldSpec(name=name, coerce=coerce_number, default=default)


def apply_schema(document: Mapping[str, Any], schema: Iterable[FieldSpec]) -> Dict[str, Any]:
    """
    Return a copy of `document` with every schema field coerced.

    Fields not named in the schema are kept unchanged; schema fields missing
    from the document are added with their default.
    """
    cleaned = dict(document)
    for field_spec in schema:
        cleaned[field_spec.name] = field_spec.apply(document)
    return cleaned
