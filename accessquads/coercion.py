"""Coerce database cell values into typed RDF literals.

Every column type maps to a lexicalization rule and a datatype IRI. A rule
raises ``TypeError`` or ``ValueError`` when the value does not fit its
column type; ``coerce_value`` then falls back to a plain literal holding the
value's ``str()`` form. Output completeness wins over type fidelity, so the
fallback never raises.
"""

from __future__ import annotations

import base64
import math
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from numbers import Real
from typing import Callable

from .namespaces import (
    XSD_BASE64_IRI,
    XSD_BOOLEAN_IRI,
    XSD_BYTE_IRI,
    XSD_DATETIME_IRI,
    XSD_DOUBLE_IRI,
    XSD_FLOAT_IRI,
    XSD_INT_IRI,
    XSD_INTEGER_IRI,
    XSD_LONG_IRI,
    XSD_NUMBER_IRI,
    XSD_STRING_IRI,
)
from .terms import DEFAULT_FACTORY, IRI, DataFactory, Literal


class ColumnType(str, Enum):
    """Column type tags of an Access database table."""

    BIG_INT = "bigint"
    BINARY = "binary"
    BOOLEAN = "boolean"
    BYTE = "byte"
    COMPLEX = "complex"
    CURRENCY = "currency"
    DATE_TIME = "datetime"
    DATE_TIME_EXTENDED = "datetimextended"
    DOUBLE = "double"
    FLOAT = "float"
    INTEGER = "integer"
    LONG = "long"
    MEMO = "memo"
    NUMERIC = "numeric"
    OLE = "ole"
    REPLICATION_ID = "repid"
    TEXT = "text"

    @classmethod
    def parse(cls, tag: object) -> ColumnType | None:
        """Normalize a type tag given as a member, a type name or a Jet type code."""
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, int) and not isinstance(tag, bool):
            return JET_TYPE_CODES.get(tag)
        if isinstance(tag, str):
            try:
                return cls(tag.strip().lower())
            except ValueError:
                return None
        return None


JET_TYPE_CODES = {
    0x01: ColumnType.BOOLEAN,
    0x02: ColumnType.BYTE,
    0x03: ColumnType.INTEGER,
    0x04: ColumnType.LONG,
    0x05: ColumnType.CURRENCY,
    0x06: ColumnType.FLOAT,
    0x07: ColumnType.DOUBLE,
    0x08: ColumnType.DATE_TIME,
    0x09: ColumnType.BINARY,
    0x0A: ColumnType.TEXT,
    0x0B: ColumnType.OLE,
    0x0C: ColumnType.MEMO,
    0x0F: ColumnType.REPLICATION_ID,
    0x10: ColumnType.NUMERIC,
    0x12: ColumnType.COMPLEX,
    0x13: ColumnType.BIG_INT,
    0x14: ColumnType.DATE_TIME_EXTENDED,
}


def _require_number(value: object) -> Real | Decimal:
    """Return ``value`` if it is a non-boolean number."""
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise TypeError(f"expected a number, got {type(value).__name__}")
    return value


def text_lexical(value: object) -> str:
    """Return string cells unmodified."""
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value


def boolean_lexical(value: object) -> str:
    """Return ``true`` or ``false`` for boolean cells."""
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {type(value).__name__}")
    return "true" if value else "false"


def integer_lexical(value: object) -> str:
    """Return the decimal form of an integral value without rounding.

    Floats and decimals are accepted when they have no fractional part.
    """
    number = _require_number(value)
    if isinstance(number, int):
        return str(number)
    if isinstance(number, float):
        if not number.is_integer():
            raise ValueError(f"{number!r} is not integral")
        return str(int(number))
    if isinstance(number, Decimal):
        if not number.is_finite() or number != number.to_integral_value():
            raise ValueError(f"{number!r} is not integral")
        return str(int(number))
    raise TypeError(f"expected an integer, got {type(value).__name__}")


def number_lexical(value: object) -> str:
    """Return the shortest decimal form of a number.

    Non-finite floats use the XSD spellings ``INF``, ``-INF`` and ``NaN``.
    """
    number = _require_number(value)
    if isinstance(number, float):
        if math.isnan(number):
            return "NaN"
        if math.isinf(number):
            return "INF" if number > 0 else "-INF"
        return repr(number)
    return str(number)


def whole_number_lexical(value: object) -> str:
    """Return a number rounded to an integer string with no fractional part.

    Halves round away from zero.
    """
    number = _require_number(value)
    if isinstance(number, (float, Decimal)) and not math.isfinite(number):
        raise ValueError(f"cannot write {number!r} as an integer")
    rounded = Decimal(number).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return str(rounded)


def base64_lexical(value: object) -> str:
    """Return binary cells as base64 text."""
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"expected bytes, got {type(value).__name__}")
    return base64.b64encode(bytes(value)).decode("ascii")


def datetime_lexical(value: object) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision.

    Naive datetimes are taken to be in UTC.
    """
    if not isinstance(value, datetime):
        raise TypeError(f"expected a datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond // 1000:03d}Z"
    )


Rule = tuple[Callable[[object], str], str]

COERCION_RULES: dict[ColumnType, Rule] = {
    ColumnType.BIG_INT: (integer_lexical, XSD_INTEGER_IRI),
    ColumnType.BINARY: (base64_lexical, XSD_BASE64_IRI),
    ColumnType.BOOLEAN: (boolean_lexical, XSD_BOOLEAN_IRI),
    ColumnType.BYTE: (integer_lexical, XSD_BYTE_IRI),
    ColumnType.COMPLEX: (number_lexical, XSD_NUMBER_IRI),
    ColumnType.CURRENCY: (text_lexical, XSD_STRING_IRI),
    ColumnType.DATE_TIME: (datetime_lexical, XSD_DATETIME_IRI),
    ColumnType.DATE_TIME_EXTENDED: (text_lexical, XSD_STRING_IRI),
    ColumnType.DOUBLE: (number_lexical, XSD_DOUBLE_IRI),
    ColumnType.FLOAT: (number_lexical, XSD_FLOAT_IRI),
    ColumnType.INTEGER: (whole_number_lexical, XSD_INT_IRI),
    ColumnType.LONG: (whole_number_lexical, XSD_LONG_IRI),
    ColumnType.MEMO: (text_lexical, XSD_STRING_IRI),
    ColumnType.NUMERIC: (text_lexical, XSD_STRING_IRI),
    ColumnType.OLE: (base64_lexical, XSD_BASE64_IRI),
    ColumnType.REPLICATION_ID: (text_lexical, XSD_STRING_IRI),
    ColumnType.TEXT: (text_lexical, XSD_STRING_IRI),
}

_UNCOVERED = set(ColumnType) - set(COERCION_RULES)
if _UNCOVERED:
    raise RuntimeError(
        f"no coercion rule for column types: {sorted(t.value for t in _UNCOVERED)}"
    )


def coerce_value(
    value: object, column_type: object, factory: DataFactory | None = None
) -> Literal:
    """Convert a cell value into a literal typed after its column type."""
    factory = factory or DEFAULT_FACTORY
    rule = COERCION_RULES.get(ColumnType.parse(column_type))
    if rule is not None:
        lexical_rule, datatype = rule
        try:
            return factory.literal(lexical_rule(value), IRI(datatype))
        except (TypeError, ValueError, ArithmeticError):
            pass
    return factory.literal(str(value))
