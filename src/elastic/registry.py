"""Converter protocols and registries.

This module defines the contracts the engine dispatches through:

    - ConverterFunc: a user function ``fn(source, target_tp)``
    - ConvertsTo: a method a value's class may implement to describe its own
      outgoing conversions
    - BuiltinConverter: a built-in rule selected by representation kinds
    - KeyedConverters: an ordered registry of ConverterFuncs keyed by type

Every converter has a three-way outcome. Returning a value means success,
returning ``NO_CONVERSION`` means "not applicable, try the next strategy" and
raising aborts the whole conversion.
"""

from collections.abc import Callable, Hashable, Iterator
from enum import Enum
from typing import TYPE_CHECKING, Any, Final, Protocol, runtime_checkable

if TYPE_CHECKING:
    from elastic.engine import ConverterEngine


class NoConversion(Enum):
    NO_CONVERSION = "NO_CONVERSION"

    def __repr__(self) -> str:
        return self.value


#: Returned by a converter that does not handle the requested conversion
NO_CONVERSION: Final = NoConversion.NO_CONVERSION

#: ``fn(source, target_tp)`` returning the converted value or NO_CONVERSION
ConverterFunc = Callable[[Any, Any], Any]


@runtime_checkable
class ConvertsTo(Protocol):
    def convert_to(self, target_tp: Any) -> Any:
        """Convert this value to the given type.

        Args:
            target_tp: The requested target type descriptor.

        Returns:
            The converted value, or NO_CONVERSION if this value does not know
            how to produce the target. The result does not need to be of the
            exact target type; the engine keeps converting it.
        """
        ...


@runtime_checkable
class BuiltinConverter(Protocol):
    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        """Check if this rule handles the given type pair.

        Args:
            source_tp: The exact runtime type of the source value.
            target_tp: The target type descriptor.

        Returns:
            True if this rule claims the conversion.
        """
        ...

    def convert(self, source: Any, target_tp: Any, engine: "ConverterEngine") -> Any:
        """Convert a value to exactly the target type.

        Args:
            source: The value to convert.
            target_tp: The target type descriptor.
            engine: The engine, for converting nested elements.

        Returns:
            A value whose type is the origin of ``target_tp``.
        """
        ...


class KeyedConverters:
    """Ordered lists of converter functions keyed by type descriptor.

    Keys iterate in the order they were first registered and each list keeps
    registration order, so lookups are deterministic.
    """

    def __init__(self) -> None:
        self._entries: dict[Any, list[ConverterFunc]] = {}

    def add(self, key: Any, fn: ConverterFunc) -> None:
        self._entries.setdefault(key, []).append(fn)

    def get(self, key: Any) -> tuple[ConverterFunc, ...]:
        # Unhashable descriptors can never have been registered
        if not isinstance(key, Hashable):
            return ()
        return tuple(self._entries.get(key, ()))

    def items(self) -> Iterator[tuple[Any, tuple[ConverterFunc, ...]]]:
        return ((key, tuple(fns)) for key, fns in list(self._entries.items()))

    def __contains__(self, key: Any) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._entries))
