"""Built-in conversions to and from text.

Two rules live here:

    - ToStringConverter renders values into a string-kind target. A class
      that defines its own ``__str__`` is rendered with it; otherwise booleans
      and numbers get their conventional spelling (``"true"``, ``"-4"``,
      ``"9.2"``).
    - FromStringConverter parses a string-kind source into a boolean or
      numeric target, range-checked against the target's width.

Parse failures are not wrapped: callers see the ValueError or OverflowError
raised while parsing.

Example:
    Converting Int8(-4) to str gives "-4"; converting "-4" back to Int8 gives
    Int8(-4); converting "300" to Int8 raises OverflowError.
"""

import math
import re
from typing import TYPE_CHECKING, Any

from elastic.kinds import SCALAR_KINDS, Kind, kind_of, origin_of
from elastic.scalars import Float32, bit_size

if TYPE_CHECKING:
    from elastic.engine import ConverterEngine

_BOOL_LITERALS = {
    "1": True,
    "t": True,
    "T": True,
    "TRUE": True,
    "true": True,
    "True": True,
    "0": False,
    "f": False,
    "F": False,
    "FALSE": False,
    "false": False,
    "False": False,
}

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_UINT_PATTERN = re.compile(r"[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?)|nan",
    re.IGNORECASE,
)

# Enough significant digits to round-trip any binary64 value
_MAX_FLOAT_DIGITS = 17


def renders_text(tp: Any) -> bool:
    """Check if a class provides its own text rendering.

    Every Python object has ``__str__``, so the capability is taken to mean
    that some class in the MRO outside the builtins defines it. Dataclasses
    (which only generate ``__repr__``) and plain numbers don't qualify.

    Args:
        tp: The exact runtime type of a value.

    Returns:
        True if ``str()`` on instances uses a user-level implementation.
    """
    if not isinstance(tp, type):
        return False
    for klass in tp.__mro__:
        if "__str__" in vars(klass):
            return klass.__module__ != "builtins"
    return False


def format_scalar(value: Any) -> str:
    """Render a boolean or number the conventional way.

    Args:
        value: A bool, int or float (or subclass).

    Returns:
        ``"true"``/``"false"`` for booleans, base-10 digits for integers and,
        for floats, the shortest ``g``-style text that parses back to the same
        value at the value's own width (``"9.2"`` for ``Float32(9.2)``).

    Raises:
        TypeError: If the value is not boolean or numeric.
    """
    match kind_of(type(value)):
        case Kind.BOOL:
            return "true" if value else "false"
        case Kind.INT | Kind.UINT:
            return str(int(value))
        case Kind.FLOAT:
            return _format_float(value)
        case _:
            raise TypeError(f"Cannot format {type(value).__name__} as a scalar")


def _format_float(value: float) -> str:
    narrow = Float32 if bit_size(type(value)) == 32 else float
    for precision in range(1, _MAX_FLOAT_DIGITS + 1):
        text = format(float(value), f".{precision}g")
        if narrow(text) == value:
            return text
    # nan never compares equal
    return format(float(value), "g")


def parse_bool(text: str) -> bool:
    try:
        return _BOOL_LITERALS[text]
    except KeyError:
        raise ValueError(f"invalid literal for bool: {text!r}") from None


def parse_int(text: str, target: type) -> int:
    """Parse base-10 digits into ``target``; sized targets check their range.

    Only an optional sign followed by ASCII digits is accepted, and unsigned
    targets take no sign at all.
    """
    pattern = _UINT_PATTERN if kind_of(target) is Kind.UINT else _INT_PATTERN
    if not pattern.fullmatch(text):
        raise ValueError(f"invalid literal for {target.__name__}: {text!r}")
    return target(int(text, 10))


def parse_float(text: str, target: type) -> float:
    """Parse a decimal float into ``target``, checking its range."""
    if not _FLOAT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid literal for {target.__name__}: {text!r}")
    number = float(text)
    if math.isinf(number) and "inf" not in text.lower():
        raise OverflowError(f"{text!r} is out of range for {target.__name__}")
    return target(number)


class ToStringConverter:
    """Renders text-capable values and scalars into a string-kind target."""

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        if kind_of(target_tp) is not Kind.STRING:
            return False
        return renders_text(source_tp) or kind_of(source_tp) in SCALAR_KINDS

    def convert(self, source: Any, target_tp: Any, engine: "ConverterEngine") -> Any:
        text = str(source) if renders_text(type(source)) else format_scalar(source)
        return origin_of(target_tp)(text)


class FromStringConverter:
    """Parses a string-kind value into a boolean or numeric target."""

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return kind_of(source_tp) is Kind.STRING and kind_of(target_tp) in SCALAR_KINDS

    def convert(self, source: Any, target_tp: Any, engine: "ConverterEngine") -> Any:
        text = str(source)
        target = origin_of(target_tp)
        match kind_of(target):
            case Kind.BOOL:
                return target(parse_bool(text))
            case Kind.INT | Kind.UINT:
                return parse_int(text, target)
            case _:
                return parse_float(text, target)
