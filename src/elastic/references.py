"""Assignable locations for ``ConverterEngine.set``.

A Reference knows the declared type of the place it points to and how to
write into it. The engine converts the source to that type and only writes on
success.

Example::

    port = Ref(UInt16)
    engine.set(port, "8080")
    port.get()  # UInt16(8080)
"""

from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar, cast, get_type_hints, runtime_checkable

_T = TypeVar("_T")

# Sentinel value for unset references
UNSET = cast(Any, object())


@runtime_checkable
class Reference(Protocol):
    @property
    def target_type(self) -> Any:
        """The declared type of the referenced location."""
        ...

    def set(self, value: Any) -> None:
        """Write an already converted value into the referenced location."""
        ...


@dataclass(slots=True)
class Ref(Generic[_T]):
    """A standalone box holding a value of a declared type.

    Attributes:
        target_type: The type values are converted to before being stored.
        value: The current value, or UNSET.
    """

    target_type: Any
    value: Any = UNSET

    def get(self) -> _T:
        if self.value is UNSET:
            raise LookupError(f"Reference to {self.target_type} has not been set")
        return self.value

    def set(self, value: _T) -> None:
        self.value = value

    @property
    def is_set(self) -> bool:
        return self.value is not UNSET


class AttributeRef:
    """A reference to an attribute of an object.

    The declared type comes from the class's type hints; if the attribute is
    not annotated, the type of its current value is used instead.
    """

    def __init__(self, obj: Any, name: str) -> None:
        self._obj = obj
        self._name = name
        self._target_type = self._resolve_type(obj, name)

    @staticmethod
    def _resolve_type(obj: Any, name: str) -> Any:
        hints = get_type_hints(type(obj))
        if name in hints:
            return hints[name]
        if hasattr(obj, name):
            return type(getattr(obj, name))
        raise AttributeError(
            f"{type(obj).__name__} has no annotation or value for attribute {name!r}"
        )

    @property
    def target_type(self) -> Any:
        return self._target_type

    def set(self, value: Any) -> None:
        setattr(self._obj, self._name, value)

    def __repr__(self) -> str:
        return f"AttributeRef({type(self._obj).__name__}.{self._name}: {self._target_type})"
