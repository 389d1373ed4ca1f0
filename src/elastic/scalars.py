"""Fixed-width numeric types.

Python's ``int`` is unbounded and ``float`` is always binary64, so the widths
that untyped data is usually decoded into are modelled as subclasses. Each
class is its own type descriptor: ``Int8`` and ``Int16`` are never the same
target even though both hold integers.

Example::

    Int8(127)  # fine
    Int8(128)  # OverflowError
    Int8.wrap(128)  # Int8(-128), two's-complement truncation
    UInt64.wrap(-1)  # 18446744073709551615
"""

import math
import struct
from typing import Any, ClassVar, Self


class SizedInt(int):
    """Base class for integers with a fixed bit width.

    Subclasses declare their width and signedness as class keywords::

        class Int24(SizedInt, bits=24, signed=True): ...

    The constructor rejects out-of-range values; use ``wrap`` for the
    truncating behaviour of a representation-level conversion.
    """

    bits: ClassVar[int] = 64
    signed: ClassVar[bool] = True

    def __init_subclass__(cls, *, bits: int | None = None, signed: bool | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if bits is not None:
            cls.bits = bits
        if signed is not None:
            cls.signed = signed

    def __new__(cls, value: Any = 0) -> Self:
        number = int(value)
        if not cls.min_value() <= number <= cls.max_value():
            raise OverflowError(f"{number} is out of range for {cls.__name__}")
        return super().__new__(cls, number)

    @classmethod
    def min_value(cls) -> int:
        return -(1 << (cls.bits - 1)) if cls.signed else 0

    @classmethod
    def max_value(cls) -> int:
        return (1 << (cls.bits - 1)) - 1 if cls.signed else (1 << cls.bits) - 1

    @classmethod
    def wrap(cls, value: Any) -> Self:
        """Truncate ``value`` to this width, discarding the high bits."""
        number = int(value) & ((1 << cls.bits) - 1)
        if cls.signed and number > cls.max_value():
            number -= 1 << cls.bits
        return cls(number)


class Int8(SizedInt, bits=8, signed=True): ...


class Int16(SizedInt, bits=16, signed=True): ...


class Int32(SizedInt, bits=32, signed=True): ...


class Int64(SizedInt, bits=64, signed=True): ...


class UInt8(SizedInt, bits=8, signed=False): ...


class UInt16(SizedInt, bits=16, signed=False): ...


class UInt32(SizedInt, bits=32, signed=False): ...


class UInt64(SizedInt, bits=64, signed=False): ...


class Float32(float):
    """Single precision float.

    The stored value is the binary64 number nearest to the rounded binary32
    value, so ``Float32(9.2) != 9.2`` but ``Float32(9.2) == Float32("9.2")``.
    """

    bits: ClassVar[int] = 32

    def __new__(cls, value: Any = 0.0) -> Self:
        number = float(value)
        try:
            (narrowed,) = struct.unpack("<f", struct.pack("<f", number))
        except OverflowError:
            raise OverflowError(f"{number!r} is out of range for {cls.__name__}") from None
        return super().__new__(cls, narrowed)

    @classmethod
    def wrap(cls, value: Any) -> Self:
        """Narrow ``value``, saturating to infinity instead of raising."""
        number = float(value)
        try:
            return cls(number)
        except OverflowError:
            return cls(math.copysign(math.inf, number))


def bit_size(tp: Any) -> int | None:
    """Return the width in bits of a numeric type, or None if unbounded.

    Args:
        tp: A numeric class (``int``, ``float``, a sized scalar or a subclass).

    Returns:
        The declared width for sized scalars, 64 for other floats, None for
        plain integers.
    """
    if isinstance(tp, type):
        if issubclass(tp, (SizedInt, Float32)):
            return tp.bits
        if issubclass(tp, float):
            return 64
    return None
