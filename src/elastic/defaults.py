"""The built-in rules every engine falls back to, in the order they are tried."""

from elastic.coercion import KindCoercionConverter, ZeroValueConverter
from elastic.mappings import MappingConverter
from elastic.registry import BuiltinConverter
from elastic.sequences import SequenceConverter
from elastic.strings import FromStringConverter, ToStringConverter

DEFAULT_BUILTINS: tuple[BuiltinConverter, ...] = (
    ZeroValueConverter(),
    ToStringConverter(),
    FromStringConverter(),
    SequenceConverter(),
    MappingConverter(),
    KindCoercionConverter(),
)
