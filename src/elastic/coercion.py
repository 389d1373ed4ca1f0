"""Representation-level fallbacks.

These rules run after every custom and structural strategy has declined:

    - ZeroValueConverter turns ``None`` into the zero value of a scalar,
      string or container target (``0``, ``""``, ``[]``), the way missing
      values in decoded data are usually meant.
    - KindCoercionConverter converts directly between types that share a
      representation: numbers between widths and between int/float (floats
      truncate toward zero, sized ints wrap, Float32 saturates), aliases of
      bool/str/bytes, and str <-> bytes through UTF-8.
"""

from typing import TYPE_CHECKING, Any

from elastic.kinds import NUMERIC_KINDS, Kind, kind_of, origin_of
from elastic.scalars import Float32, SizedInt

if TYPE_CHECKING:
    from elastic.engine import ConverterEngine

_ENCODING = "utf-8"
# Keeps undecodable bytes round-trippable instead of failing or replacing them
_ENCODING_ERRORS = "surrogateescape"

_ALIASABLE_KINDS = frozenset({Kind.BOOL, Kind.STRING, Kind.BYTES})


def coerce_number(value: Any, target: type) -> Any:
    """Convert a number to a numeric class of any width.

    Args:
        value: An int or float (or subclass, but not bool).
        target: The numeric class to produce.

    Returns:
        An instance of exactly ``target``.
    """
    if kind_of(target) in (Kind.INT, Kind.UINT):
        number = int(value)
        return target.wrap(number) if issubclass(target, SizedInt) else target(number)
    return target.wrap(value) if issubclass(target, Float32) else target(float(value))


class ZeroValueConverter:
    """Converts None into the empty/zero value of the target type."""

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return source_tp is type(None) and kind_of(target_tp) is not Kind.OTHER

    def convert(self, source: Any, target_tp: Any, engine: "ConverterEngine") -> Any:
        return origin_of(target_tp)()


class KindCoercionConverter:
    """Converts between types with the same underlying representation."""

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        source_kind = kind_of(source_tp)
        target_kind = kind_of(target_tp)
        if source_kind in NUMERIC_KINDS and target_kind in NUMERIC_KINDS:
            return True
        if source_kind is target_kind:
            return source_kind in _ALIASABLE_KINDS
        return {source_kind, target_kind} == {Kind.STRING, Kind.BYTES}

    def convert(self, source: Any, target_tp: Any, engine: "ConverterEngine") -> Any:
        target = origin_of(target_tp)
        match kind_of(type(source)), kind_of(target):
            case Kind.STRING, Kind.BYTES:
                return target(str(source).encode(_ENCODING, _ENCODING_ERRORS))
            case Kind.BYTES, Kind.STRING:
                return target(bytes(source).decode(_ENCODING, _ENCODING_ERRORS))
            case Kind.STRING, Kind.STRING:
                return target(str(source))
            case Kind.BYTES, Kind.BYTES:
                return target(bytes(source))
            case Kind.BOOL, Kind.BOOL:
                return target(source)
            case _:
                return coerce_number(source, target)
