"""Engine configuration."""

from pydantic import BaseModel, ConfigDict, Field

#: Re-dispatch limit used when no options are given
DEFAULT_MAX_REDISPATCH_DEPTH = 64


class EngineOptions(BaseModel):
    """Settings for a ConverterEngine.

    Example::

        engine = ConverterEngine(EngineOptions(max_redispatch_depth=8))
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_redispatch_depth: int = Field(
        default=DEFAULT_MAX_REDISPATCH_DEPTH,
        ge=1,
        description=(
            "How many times a single conversion may loop back through the "
            "resolution chain after a converter returns a value that is not yet "
            "of the target type. Exceeding it raises ConversionDidNotConvergeError."
        ),
    )
