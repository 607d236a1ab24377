"""Runtime values of the Lox language.

Lox values are represented by plain Python objects where one fits:
strings are `str`, numbers are always `float` and booleans are `bool`.
`nil` is the `NIL` marker below, so that a missing Python value can never
be mistaken for a Lox one. Functions are the callables defined in
`pylox.callables`.

Note that `bool` is a subclass of `int` in Python but never of `float`,
so `isinstance(value, float)` alone identifies a Lox number.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any


class Nil:
    """Marker object for the Lox `nil` value."""
    def __repr__(self) -> str:
        return 'nil'


NIL = Nil()


def is_number(value: Any) -> bool:
    return isinstance(value, float)


def is_truthy(value: Any) -> bool:
    """Everything is truthy except `false` and `nil`; `0` and `""` are truthy."""
    if isinstance(value, Nil):
        return False
    if isinstance(value, bool):
        return value
    return True


def values_equal(a: Any, b: Any) -> bool:
    """Cross-type equality used by `==` and `!=`.

    Two values are equal only when they are of the same kind and that
    kind is string, number, boolean or nil. Mismatched kinds, and any
    pairing involving a function, compare unequal. Numbers compare by
    IEEE value, so `nan` is unequal to itself.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, float) and isinstance(b, float):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    if isinstance(a, Nil) and isinstance(b, Nil):
        return True
    return False


def type_name(value: Any) -> str:
    """Return the Lox kind name of a runtime value, for diagnostics."""
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, Nil):
        return 'nil'
    return 'function'


def format_number(value: float) -> str:
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    if value.is_integer():
        if value == 0 and math.copysign(1.0, value) < 0:
            return '-0'
        return str(int(value))
    # repr gives the shortest digits that round-trip; never print an exponent
    text = repr(value)
    if 'e' in text:
        return format(Decimal(text), 'f')
    return text


def to_string(value: Any) -> str:
    """Convert a Lox value to the text `print` writes."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, Nil):
        return 'nil'
    return str(value)
