from typing import Any, TypeVar, overload

from elastic.engine import ConverterEngine
from elastic.exceptions import (
    ConversionDidNotConvergeError,
    ConversionError,
    ExpectedReferenceError,
    IncompatibleTypesError,
    NotACapabilityError,
    RegistryFrozenError,
)
from elastic.kinds import Kind, kind_of, origin_of
from elastic.options import EngineOptions
from elastic.references import AttributeRef, Ref, Reference
from elastic.registry import NO_CONVERSION, ConverterFunc, ConvertsTo
from elastic.scalars import (
    Float32,
    Int8,
    Int16,
    Int32,
    Int64,
    SizedInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)

_T = TypeVar("_T")

# Shared engine behind convert() and set_value(). Code that registers its own
# converters should usually create a ConverterEngine and pass it around instead.
default_engine = ConverterEngine()


@overload
def convert(source: Any, target_tp: type[_T]) -> _T: ...


@overload
def convert(source: Any, target_tp: Any) -> Any: ...


def convert(source: Any, target_tp: Any) -> Any:
    """Convert ``source`` to exactly ``target_tp`` using the default engine."""
    return default_engine.convert(source, target_tp)


def set_value(ref: Reference, source: Any) -> None:
    """Convert ``source`` and write it into ``ref`` using the default engine."""
    default_engine.set(ref, source)


__all__ = [
    "AttributeRef",
    "ConversionDidNotConvergeError",
    "ConversionError",
    "ConverterEngine",
    "ConverterFunc",
    "ConvertsTo",
    "EngineOptions",
    "ExpectedReferenceError",
    "Float32",
    "IncompatibleTypesError",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Kind",
    "NO_CONVERSION",
    "NotACapabilityError",
    "Ref",
    "Reference",
    "RegistryFrozenError",
    "SizedInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "convert",
    "default_engine",
    "kind_of",
    "origin_of",
    "set_value",
]
