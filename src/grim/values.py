"""Runtime values.

Values are small immutable scalars. Arithmetic and comparison operators
coerce an Int operand to Float when the other operand is a Float; there
is no other implicit conversion.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, Union

from .lexer import INT64_MAX

INT64_MIN = -(2**63)


@dataclass(frozen=True)
class IntValue:
    value: int
    type_name: ClassVar[str] = "Int"


@dataclass(frozen=True)
class FloatValue:
    value: float
    type_name: ClassVar[str] = "Float"


@dataclass(frozen=True)
class BoolValue:
    value: bool
    type_name: ClassVar[str] = "Bool"


@dataclass(frozen=True)
class StrValue:
    value: str
    type_name: ClassVar[str] = "Str"


Value = Union[IntValue, FloatValue, BoolValue, StrValue]
Numeric = (IntValue, FloatValue)


def is_numeric(value: Value) -> bool:
    return isinstance(value, Numeric)


def in_int64_range(n: int) -> bool:
    return INT64_MIN <= n <= INT64_MAX


def decimal_text(x: float) -> str:
    """Shortest round-trip decimal for ``x`` written without an exponent."""
    text = format(Decimal(repr(x)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def render(value: Value) -> str:
    """Text written by print/printl."""
    if isinstance(value, BoolValue):
        return "true" if value.value else "false"
    if isinstance(value, IntValue):
        return str(value.value)
    if isinstance(value, FloatValue):
        x = value.value
        if math.isnan(x):
            return "NaN"
        if math.isinf(x):
            return "inf" if x > 0 else "-inf"
        return decimal_text(x)
    return value.value


__all__ = [
    "IntValue",
    "FloatValue",
    "BoolValue",
    "StrValue",
    "Value",
    "Numeric",
    "INT64_MIN",
    "is_numeric",
    "in_int64_range",
    "decimal_text",
    "render",
]
