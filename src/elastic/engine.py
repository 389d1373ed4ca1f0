"""The conversion engine.

A ConverterEngine converts a value to a type that is only known at runtime.
It tries, in order:

    1. identity: the value already has exactly the target type
    2. source converters registered for the value's exact type
    3. the value's own ``convert_to`` method (ConvertsTo)
    4. target converters registered for the exact target type
    5. capability converters whose Protocol/ABC the value satisfies
    6. the built-in rules (None to zero value, text rendering and parsing,
       sequences, mappings, representation-level coercion)

Custom strategies (2-5) are consulted before the built-in rules so that they
can override them. When one of them returns a value, the engine loops back to
step 1 with that value, so a converter may return an approximate result
(a plain ``float`` for a ``Float32`` target, say) and leave the rest to the
engine. The number of such loops is bounded by
``EngineOptions.max_redispatch_depth``. A converter that returns the target's
container class (a ``list`` for ``list[int]``) is not asked again; its result
goes straight to the built-in element-wise rebuild.

Example::

    engine = ConverterEngine()
    engine.convert("42", Int16)  # Int16(42)
    engine.convert({"1": "uno"}, dict[int, str])  # {1: "uno"}
"""

from abc import ABCMeta
from collections.abc import Callable, Iterator, Sequence
from functools import partial
from logging import getLogger
from typing import Any, TypeVar, overload

from typing_extensions import is_protocol

from elastic.defaults import DEFAULT_BUILTINS
from elastic.exceptions import (
    ConversionDidNotConvergeError,
    ExpectedReferenceError,
    IncompatibleTypesError,
    NotACapabilityError,
    RegistryFrozenError,
)
from elastic.kinds import is_any, origin_of, strip_annotations
from elastic.options import EngineOptions
from elastic.references import Reference
from elastic.registry import (
    NO_CONVERSION,
    BuiltinConverter,
    ConverterFunc,
    ConvertsTo,
    KeyedConverters,
)

logger = getLogger(__name__)

_T = TypeVar("_T")


def _check_capability(tp: Any) -> None:
    """Raise NotACapabilityError unless ``tp`` can be checked with isinstance."""
    if not isinstance(tp, type):
        raise NotACapabilityError(f"Capability must be a Protocol or ABC class, got {tp!r}")
    if is_protocol(tp):
        if not getattr(tp, "_is_runtime_protocol", False):
            raise NotACapabilityError(
                f"Protocol {tp.__name__} must be decorated with @runtime_checkable"
            )
        return
    if not isinstance(tp, ABCMeta):
        raise NotACapabilityError(
            f"Capability must be a Protocol or ABC, got concrete type {tp.__name__}"
        )


class ConverterEngine:
    """Resolves conversions through custom converters and built-in rules.

    Engines are independent: each has its own registries. Registration is
    not synchronized, so configure an engine up front and call ``freeze()``
    before sharing it between threads.

    Attributes:
        _options: Limits applied while converting.
        _builtins: Ordered built-in rules tried after every custom strategy.
        _source_converters: Converters keyed by the exact source type.
        _target_converters: Converters keyed by the exact target type.
        _capability_converters: Converters keyed by Protocol/ABC.
    """

    def __init__(
        self,
        options: EngineOptions | None = None,
        builtins: Sequence[BuiltinConverter] | None = None,
    ) -> None:
        self._options = options if options is not None else EngineOptions()
        self._builtins = tuple(DEFAULT_BUILTINS if builtins is None else builtins)
        self._source_converters = KeyedConverters()
        self._target_converters = KeyedConverters()
        self._capability_converters = KeyedConverters()
        self._frozen = False

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(source_converters={len(self._source_converters)}, "
            f"target_converters={len(self._target_converters)}, "
            f"capability_converters={len(self._capability_converters)}, frozen={self._frozen})"
        )

    @property
    def options(self) -> EngineOptions:
        return self._options

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject any further registration on this engine."""
        self._frozen = True
        logger.debug("Froze converter engine %r", self)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise RegistryFrozenError("Cannot register converters on a frozen engine")

    def add_source_converter(self, source_tp: Any, fn: ConverterFunc) -> None:
        """Register a converter for values whose exact type is ``source_tp``.

        Args:
            source_tp: The runtime type of values this converter accepts.
            fn: Called as ``fn(source, target_tp)`` for any target.
        """
        self._check_not_frozen()
        self._source_converters.add(source_tp, fn)
        logger.debug("Registered source converter %r for %s", fn, source_tp)

    def add_target_converter(self, target_tp: Any, fn: ConverterFunc) -> None:
        """Register a converter for conversions whose target is exactly ``target_tp``.

        Args:
            target_tp: The target type descriptor this converter produces.
            fn: Called as ``fn(source, target_tp)`` for any source.
        """
        self._check_not_frozen()
        target_tp = strip_annotations(target_tp)
        self._target_converters.add(target_tp, fn)
        logger.debug("Registered target converter %r for %s", fn, target_tp)

    def add_interface_converter(self, capability_tp: Any, fn: ConverterFunc) -> None:
        """Register a converter for values satisfying a capability.

        Capabilities are tried in the order they were first registered, and
        each capability's converters in registration order.

        Args:
            capability_tp: A ``@runtime_checkable`` Protocol or an ABC.
            fn: Called as ``fn(source, target_tp)`` when
                ``isinstance(source, capability_tp)``.

        Raises:
            NotACapabilityError: If ``capability_tp`` is a concrete type.
        """
        self._check_not_frozen()
        _check_capability(capability_tp)
        self._capability_converters.add(capability_tp, fn)
        logger.debug("Registered capability converter %r for %s", fn, capability_tp)

    @overload
    def convert(self, source: Any, target_tp: type[_T]) -> _T: ...

    @overload
    def convert(self, source: Any, target_tp: Any) -> Any: ...

    def convert(self, source: Any, target_tp: Any) -> Any:
        """Convert a value to exactly the given type.

        Args:
            source: The value to convert.
            target_tp: The target type descriptor.

        Returns:
            A value whose type is exactly the target's origin class
            (``source`` itself if it already is).

        Raises:
            IncompatibleTypesError: If no strategy applies.
            ConversionDidNotConvergeError: If custom converters keep returning
                values that are not of the target type.
            ValueError, OverflowError: If parsing a string fails.
            Exception: Anything a custom converter raises, unchanged.
        """
        target_tp = strip_annotations(target_tp)
        target_origin = origin_of(target_tp)
        limit = self._options.max_redispatch_depth
        value = source
        depth = 0

        while True:
            if is_any(target_tp) or type(value) is target_tp:
                return value
            if depth > limit:
                raise ConversionDidNotConvergeError(value, target_tp, depth)
            # A converter already produced the right container (a list for
            # list[int]); only its elements still need converting.
            if depth > 0 and target_origin is not target_tp and type(value) is target_origin:
                return self._run_builtins(value, target_tp)

            result = self._run_custom_strategies(value, target_tp)
            if result is NO_CONVERSION:
                return self._run_builtins(value, target_tp)
            value = result
            depth += 1

    def set(self, ref: Reference, source: Any) -> None:
        """Convert ``source`` to the referenced location's type and write it.

        Args:
            ref: Where to write; its ``target_type`` drives the conversion.
            source: The value to convert.

        Raises:
            ExpectedReferenceError: If ``ref`` is not a Reference.
        """
        if isinstance(ref, type) or not isinstance(ref, Reference):
            raise ExpectedReferenceError(ref)
        ref.set(self.convert(source, ref.target_type))

    def _custom_strategies(
        self, source: Any, target_tp: Any
    ) -> Iterator[tuple[str, Callable[[], Any]]]:
        for fn in self._source_converters.get(type(source)):
            yield "source", partial(fn, source, target_tp)

        if isinstance(source, ConvertsTo) and not isinstance(source, type):
            yield "self-describing", partial(source.convert_to, target_tp)

        for fn in self._target_converters.get(target_tp):
            yield "target", partial(fn, source, target_tp)

        for capability, fns in self._capability_converters.items():
            if isinstance(source, capability):
                for fn in fns:
                    yield "capability", partial(fn, source, target_tp)

    def _run_custom_strategies(self, source: Any, target_tp: Any) -> Any:
        for label, attempt in self._custom_strategies(source, target_tp):
            result = attempt()
            if result is not NO_CONVERSION:
                logger.debug(
                    "%s converter turned %s into %s for target %s",
                    label,
                    type(source).__name__,
                    type(result).__name__,
                    target_tp,
                )
                return result
        return NO_CONVERSION

    def _run_builtins(self, source: Any, target_tp: Any) -> Any:
        source_tp = type(source)
        for builtin in self._builtins:
            if builtin.matches(source_tp, target_tp):
                return builtin.convert(source, target_tp, self)
        raise IncompatibleTypesError(source, target_tp)
