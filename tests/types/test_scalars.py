import math
from typing import Any

import pytest

from elastic import ConverterEngine, Float32, Int8, Int16, Int32, Int64, SizedInt, UInt8, UInt64
from elastic.kinds import Kind, kind_of
from elastic.scalars import bit_size


class Int24(SizedInt, bits=24, signed=True): ...


class Port(UInt8):
    pass


@pytest.mark.parametrize(
    ("tp", "min_value", "max_value"),
    [
        (Int8, -128, 127),
        (Int16, -32768, 32767),
        (Int32, -(2**31), 2**31 - 1),
        (Int64, -(2**63), 2**63 - 1),
        (UInt8, 0, 255),
        (UInt64, 0, 2**64 - 1),
        (Int24, -(2**23), 2**23 - 1),
    ],
)
def test_sized_int_bounds(tp: type[SizedInt], min_value: int, max_value: int) -> None:
    assert tp.min_value() == min_value
    assert tp.max_value() == max_value
    assert tp(min_value) == min_value
    assert tp(max_value) == max_value
    with pytest.raises(OverflowError, match=f"out of range for {tp.__name__}"):
        tp(max_value + 1)
    with pytest.raises(OverflowError):
        tp(min_value - 1)


def test_sized_int_defaults_to_zero() -> None:
    assert Int8() == 0
    assert type(Int8()) is Int8


def test_sized_int_arithmetic_returns_plain_int() -> None:
    assert type(Int8(100) + Int8(100)) is int


@pytest.mark.parametrize(
    ("tp", "value", "expected"),
    [
        (Int8, 128, -128),
        (Int8, 255, -1),
        (Int8, -129, 127),
        (UInt8, 256, 0),
        (UInt8, -1, 255),
        (UInt64, -1, 2**64 - 1),
        (Int24, 2**23, -(2**23)),
    ],
)
def test_sized_int_wrap(tp: type[SizedInt], value: int, expected: int) -> None:
    result = tp.wrap(value)
    assert result == expected
    assert type(result) is tp


def test_subclass_inherits_width() -> None:
    assert Port.bits == 8
    assert not Port.signed
    assert kind_of(Port) is Kind.UINT
    with pytest.raises(OverflowError):
        Port(256)


def test_float32_narrows_precision() -> None:
    assert Float32(9.2) != 9.2
    assert Float32(9.2) == Float32("9.2")
    assert Float32(0.5) == 0.5


def test_float32_out_of_range() -> None:
    with pytest.raises(OverflowError, match="out of range for Float32"):
        Float32(1e39)


@pytest.mark.parametrize(("value", "expected"), [(1e39, math.inf), (-1e39, -math.inf), (2.0, 2.0)])
def test_float32_wrap_saturates(value: float, expected: float) -> None:
    result = Float32.wrap(value)
    assert result == expected
    assert type(result) is Float32


def test_float32_keeps_nan() -> None:
    assert math.isnan(Float32(math.nan))


@pytest.mark.parametrize(
    ("tp", "expected"),
    [(Int8, 8), (UInt64, 64), (Int24, 24), (Float32, 32), (float, 64), (int, None), (str, None)],
)
def test_bit_size(tp: Any, expected: int | None) -> None:
    assert bit_size(tp) == expected


def test_custom_width_converts_from_text() -> None:
    engine = ConverterEngine()
    assert engine.convert("-8388608", Int24) == Int24(-(2**23))
    with pytest.raises(OverflowError):
        engine.convert("8388608", Int24)
