"""Value representation for Lox.

Every runtime value is a ``LoxValue`` tagged with its ``LoxType``. Operators
match on the tag, never on the Python type of the payload (``bool`` is an
``int`` subclass in Python, so payload checks would let ``true == 1`` through).
"""
from __future__ import annotations
import math
from decimal import Decimal
from enum import Enum
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .callables import LoxCallable, LoxInstance


class LoxType(Enum):
    NIL = "nil"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    CALLABLE = "callable"
    INSTANCE = "instance"


class LoxValue:
    """Wraps a Python value with its Lox type."""

    __slots__ = ("value", "type")

    def __init__(self, value: Any, lox_type: LoxType):
        self.value = value
        self.type = lox_type

    def __repr__(self):
        return f"LoxValue({self.type.value}: {self.value!r})"

    def __str__(self):
        if self.type == LoxType.NIL:
            return "nil"
        if self.type == LoxType.BOOLEAN:
            return "true" if self.value else "false"
        if self.type == LoxType.NUMBER:
            return format_number(self.value)
        return str(self.value)


# ============================================================
# Constructors
# ============================================================

def lox_nil() -> LoxValue:
    return LoxValue(None, LoxType.NIL)

def lox_bool(value: bool) -> LoxValue:
    return LoxValue(bool(value), LoxType.BOOLEAN)

def lox_number(value: float) -> LoxValue:
    return LoxValue(float(value), LoxType.NUMBER)

def lox_string(value: str) -> LoxValue:
    return LoxValue(value, LoxType.STRING)

def lox_callable(value: LoxCallable) -> LoxValue:
    return LoxValue(value, LoxType.CALLABLE)

def lox_instance(value: LoxInstance) -> LoxValue:
    return LoxValue(value, LoxType.INSTANCE)


def from_literal(value: Any) -> LoxValue:
    """Convert a scanner literal (None, bool, float, str) into a LoxValue."""
    if value is None:
        return lox_nil()
    if isinstance(value, bool):
        return lox_bool(value)
    if isinstance(value, (int, float)):
        return lox_number(value)
    if isinstance(value, str):
        return lox_string(value)
    raise TypeError(f"No Lox value for literal {value!r}")


# ============================================================
# Semantics
# ============================================================

def format_number(value: float) -> str:
    """Display form of a number: integral values drop their ".0".

    Magnitudes below 1e-3 or from 1e7 up use scientific notation with a
    capital E (``1.0E21``, ``1.5E-4``). NaN and the infinities print as
    ``NaN``, ``Infinity`` and ``-Infinity``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0 or 1e-3 <= abs(value) < 1e7:
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return _scientific(value)


def _scientific(value: float) -> str:
    sign, digits, exponent = Decimal(repr(value)).as_tuple()
    exponent += len(digits) - 1
    digits = "".join(map(str, digits)).rstrip("0") or "0"
    mantissa = digits[0] + "." + (digits[1:] or "0")
    return ("-" if sign else "") + f"{mantissa}E{exponent}"


def is_truthy(value: LoxValue) -> bool:
    """nil and false are falsy; everything else, including 0 and "", is truthy."""
    if value.type == LoxType.NIL:
        return False
    if value.type == LoxType.BOOLEAN:
        return value.value
    return True


def is_equal(a: LoxValue, b: LoxValue) -> bool:
    if a.type != b.type:
        return False
    if a.type == LoxType.NIL:
        return True
    if a.type in (LoxType.CALLABLE, LoxType.INSTANCE):
        return a.value is b.value
    if a.type == LoxType.NUMBER:
        # NaN equals itself; 0 and -0 differ
        if math.isnan(a.value) and math.isnan(b.value):
            return True
        return a.value == b.value and math.copysign(1, a.value) == math.copysign(1, b.value)
    return a.value == b.value

