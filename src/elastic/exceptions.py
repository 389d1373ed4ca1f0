"""Exceptions for the conversion engine.

Conversion failures derive from ConversionError so callers can tell them apart
from errors raised by their own converters, which the engine propagates
unchanged. Parse errors from the built-in string rules are also left
unwrapped (plain ValueError/OverflowError).
"""

from typing import Any


class ConversionError(Exception):
    """The engine gave up on a conversion.

    Only the engine raises these; an exception from a custom converter reaches
    the caller as it was raised. For nested containers the context describes
    the innermost value that failed, not the top-level one.

    Attributes:
        source: The value being converted when resolution stopped.
        source_type: Its exact runtime type.
        target_type: The type descriptor it was being converted to.
        message: Human-readable description of the failure.
    """

    def __init__(self, message: str, *, source: Any = None, target_type: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        self.source_type = type(source)
        self.target_type = target_type


class IncompatibleTypesError(ConversionError):
    """Raised when no strategy in the resolution chain applies."""

    def __init__(
        self,
        source: Any,
        target_type: Any,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = f"Incompatible types: cannot convert {type(source).__name__} to {target_type}"
        super().__init__(
            message,
            source=source,
            target_type=target_type,
        )


class ConversionDidNotConvergeError(ConversionError):
    """Raised when converters keep handing back values that need re-dispatch.

    Attributes:
        depth: How many re-dispatches happened before giving up.
    """

    def __init__(self, source: Any, target_type: Any, depth: int) -> None:
        self.depth = depth
        super().__init__(
            f"Conversion of {type(source).__name__} to {target_type} did not converge "
            f"after {depth} re-dispatches",
            source=source,
            target_type=target_type,
        )


class ExpectedReferenceError(ConversionError, TypeError):
    """Raised when ``set`` is given something that is not a Reference."""

    def __init__(self, target: Any) -> None:
        super().__init__(
            f"Expected a reference, got {type(target).__name__} (value: {target!r})",
            source=target,
        )


class NotACapabilityError(TypeError):
    """Raised when a capability converter is keyed by a concrete type."""


class RegistryFrozenError(RuntimeError):
    """Raised when registering a converter on a frozen engine."""
