"""Type descriptors and representation kinds.

A type descriptor is whatever the caller passes as a conversion target: a
class, a parameterized builtin generic such as ``list[int]``, ``Any`` or
``object``. Two descriptors are the same target only if they compare equal;
a ``str`` subclass is never the same target as ``str``.

The representation kind is the broad storage category of a descriptor. The
built-in rules only look at kinds, never at exact descriptors, which is how
``class StringAlias(str)`` gets the string rules for free.
"""

import typing
from enum import Enum, auto
from typing import Any, get_args, get_origin

from elastic.scalars import SizedInt

#: Builtin classes treated as ordered sequences (after subclass checks)
SEQUENCE_TYPES = (list, tuple, set, frozenset)


class Kind(Enum):
    BOOL = auto()
    INT = auto()
    UINT = auto()
    FLOAT = auto()
    STRING = auto()
    BYTES = auto()
    SEQUENCE = auto()
    MAPPING = auto()
    OTHER = auto()


NUMERIC_KINDS = frozenset({Kind.INT, Kind.UINT, Kind.FLOAT})
SCALAR_KINDS = frozenset({Kind.BOOL, *NUMERIC_KINDS})


def strip_annotations(tp: Any) -> Any:
    """Recursively strip ``Annotated`` wrappers, which don't affect the resolved type.

    Args:
        tp: The type to unwrap.

    Returns:
        The unwrapped type.
    """
    match get_origin(tp), get_args(tp):
        case typing.Annotated, (wrapped_tp, *_):
            return strip_annotations(wrapped_tp)
        case _:
            return tp


def origin_of(tp: Any) -> Any:
    """Return the runtime class behind a descriptor (``list`` for ``list[int]``)."""
    tp = strip_annotations(tp)
    return get_origin(tp) or tp


def is_any(tp: Any) -> bool:
    """Check whether a descriptor accepts every value unchanged."""
    return tp is Any or tp is object


def kind_of(tp: Any) -> Kind:
    """Classify a descriptor by its representation kind.

    Args:
        tp: A type descriptor.

    Returns:
        The kind of the descriptor's origin class; OTHER for anything that
        is not a class (``Any``, unions, literals).
    """
    origin = origin_of(tp)
    if not isinstance(origin, type):
        return Kind.OTHER
    if issubclass(origin, bool):
        return Kind.BOOL
    if issubclass(origin, SizedInt) and not origin.signed:
        return Kind.UINT
    if issubclass(origin, int):
        return Kind.INT
    if issubclass(origin, float):
        return Kind.FLOAT
    if issubclass(origin, str):
        return Kind.STRING
    if issubclass(origin, (bytes, bytearray)):
        return Kind.BYTES
    if issubclass(origin, SEQUENCE_TYPES):
        return Kind.SEQUENCE
    if issubclass(origin, dict):
        return Kind.MAPPING
    return Kind.OTHER


def _type_params_for_base(tp: Any, base: type) -> tuple[Any, ...] | None:
    origin = get_origin(tp) or tp
    args = get_args(tp) or ()

    if origin is base:
        return args

    params = getattr(origin, "__parameters__", ())
    if args and not params:
        # Builtin subclasses such as OrderedDict[K, V] take the base's arguments as-is
        return args if isinstance(origin, type) and issubclass(origin, base) else None
    substitutions = dict(zip(params, args, strict=True)) if args else {}

    for orig_base in getattr(origin, "__orig_bases__", ()):
        base_origin = get_origin(orig_base) or orig_base
        if base_origin is typing.Generic:
            continue
        base_args = get_args(orig_base)
        resolved_args = tuple(substitutions.get(arg, arg) for arg in base_args)
        resolved_base = base_origin[resolved_args] if resolved_args else base_origin
        found = _type_params_for_base(resolved_base, base)
        if found is not None:
            return found

    return None


def type_params(tp: Any, base: type) -> tuple[Any, ...]:
    """Extract the type arguments a descriptor supplies to a builtin base.

    Follows generic subclasses, so a ``class Tags(list[str])`` reports
    ``(str,)`` for ``list``. Unparameterized or unrelated descriptors give an
    empty tuple, which callers read as "element type unknown".

    Examples:
        >>> type_params(dict[str, int], dict)
        (<class 'str'>, <class 'int'>)

        >>> type_params(list, list)
        ()
    """
    return _type_params_for_base(strip_annotations(tp), base) or ()
