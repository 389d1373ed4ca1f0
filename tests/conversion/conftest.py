import math
import struct
from dataclasses import dataclass
from typing import Any

import pytest

from elastic import NO_CONVERSION, ConverterEngine, Kind, kind_of


class StringAlias(str):
    pass


class FloatAlias(float):
    pass


class IntAlias(int):
    pass


@dataclass
class Point:
    """A plain record with no conversion support of its own."""

    x: int = 0
    y: int = 0


@dataclass
class Vector:
    """Renders itself as text and converts itself to floats (its length)."""

    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"

    def convert_to(self, target_tp: Any) -> Any:
        if kind_of(target_tp) is Kind.FLOAT:
            return math.sqrt(self.x * self.x + self.y * self.y)
        return NO_CONVERSION


def round_float_alias(source: FloatAlias, target_tp: Any) -> Any:
    """Rounds to the nearest integer instead of truncating."""
    if kind_of(target_tp) is Kind.INT:
        whole = int(source)
        return whole + 1 if source - whole > 0.5 else whole
    return NO_CONVERSION


def unpack_vector(source: Any, target_tp: Any) -> Any:
    """Builds a Vector out of 8 big-endian bytes."""
    if isinstance(source, bytes) and len(source) == 8:
        x, y = struct.unpack(">II", source)
        return Vector(x, y)
    return NO_CONVERSION


@pytest.fixture
def engine() -> ConverterEngine:
    """Create an engine with a rounding source converter and an unpacking target converter."""
    engine = ConverterEngine()
    engine.add_source_converter(FloatAlias, round_float_alias)
    engine.add_target_converter(Vector, unpack_vector)
    return engine
