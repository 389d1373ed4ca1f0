"""Converter for sequence types (list, tuple, set, frozenset).

Each source element is converted through the engine to the target's element
type, in source order, and the results are collected into the target's origin
class. Any element failure aborts the whole conversion.

Supported target shapes:
    - list[T], set[T], frozenset[T], tuple[T, ...]: every element converted to T
    - tuple[A, B, ...]: elements converted positionally, lengths must match
    - NamedTuple classes: elements converted positionally to the field
      annotations; trailing fields with defaults may be omitted
    - unparameterized targets: elements pass through unchanged

Example:
    Converting ["1", "2", "3"] to list[int] gives [1, 2, 3].
"""

from typing import TYPE_CHECKING, Any, get_type_hints

from elastic.exceptions import IncompatibleTypesError
from elastic.kinds import SEQUENCE_TYPES, Kind, kind_of, origin_of, type_params

if TYPE_CHECKING:
    from elastic.engine import ConverterEngine


def _element_types(tp: Any) -> tuple[Any, ...] | None:
    """Extract per-position element types for a fixed-length tuple target.

    Args:
        tp: A sequence type descriptor.

    Returns:
        The positional types for ``tuple[A, B]``-style targets, None for
        homogeneous or unparameterized ones.
    """
    params = type_params(tp, tuple)
    if not params or (len(params) == 2 and params[1] is Ellipsis):
        return None
    return params


def _element_type(tp: Any) -> Any:
    """Extract the element type of a homogeneous sequence descriptor.

    Args:
        tp: A sequence type descriptor (e.g., list[int], tuple[str, ...]).

    Returns:
        The element type if found, otherwise Any.
    """
    origin = origin_of(tp)
    for seq_type in SEQUENCE_TYPES:
        if issubclass(origin, seq_type):
            params = type_params(tp, seq_type)
            return params[0] if params else Any
    return Any


def _is_named_tuple(tp: type) -> bool:
    return issubclass(tp, tuple) and hasattr(tp, "_fields")


def _field_types(tp: type) -> tuple[Any, ...]:
    """Extract the declared type of each named tuple field, Any where unannotated."""
    hints = get_type_hints(tp)
    return tuple(hints.get(name, Any) for name in tp._fields)  # type: ignore[attr-defined]


class SequenceConverter:
    """Rebuilds a sequence into the target sequence type element by element."""

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return kind_of(source_tp) is Kind.SEQUENCE and kind_of(target_tp) is Kind.SEQUENCE

    def convert(self, source: Any, target_tp: Any, engine: "ConverterEngine") -> Any:
        target = origin_of(target_tp)
        if _is_named_tuple(target):
            return self._convert_named_tuple(source, target, engine)

        positional = _element_types(target_tp) if issubclass(target, tuple) else None

        if positional is not None:
            items = list(source)
            if len(items) != len(positional):
                raise IncompatibleTypesError(
                    source,
                    target_tp,
                    message=(
                        f"Incompatible types: {target_tp} expects {len(positional)} "
                        f"elements, got {len(items)}"
                    ),
                )
            return target(engine.convert(item, tp) for item, tp in zip(items, positional))

        element_tp = _element_type(target_tp)
        return target(engine.convert(item, element_tp) for item in source)

    def _convert_named_tuple(self, source: Any, target: type, engine: "ConverterEngine") -> Any:
        items = list(source)
        field_types = _field_types(target)
        required = len(field_types) - len(getattr(target, "_field_defaults", {}))
        if not required <= len(items) <= len(field_types):
            expected = (
                str(required)
                if required == len(field_types)
                else f"{required} to {len(field_types)}"
            )
            raise IncompatibleTypesError(
                source,
                target,
                message=(
                    f"Incompatible types: {target.__name__} expects {expected} "
                    f"elements, got {len(items)}"
                ),
            )
        return target(*(engine.convert(item, tp) for item, tp in zip(items, field_types)))
