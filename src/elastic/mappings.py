"""Converter for dictionary/mapping types.

Both keys and values are converted through the engine: each value to the
target's value type, then its key to the target's key type. The result is
built in source iteration order, so if two source keys convert to the same
target key the later entry wins.

Example:
    Converting {"1": "uno", "2": "dos"} to dict[int, str] gives
    {1: "uno", 2: "dos"}.
"""

from collections import defaultdict
from typing import TYPE_CHECKING, Any

from elastic.kinds import Kind, kind_of, origin_of, type_params

if TYPE_CHECKING:
    from elastic.engine import ConverterEngine


class MappingConverter:
    """Rebuilds a dict into the target dict type entry by entry."""

    def matches(self, source_tp: Any, target_tp: Any) -> bool:
        return kind_of(source_tp) is Kind.MAPPING and kind_of(target_tp) is Kind.MAPPING

    def convert(self, source: Any, target_tp: Any, engine: "ConverterEngine") -> Any:
        target = origin_of(target_tp)
        params = type_params(target_tp, dict)
        key_tp, value_tp = params if len(params) == 2 else (Any, Any)

        result: dict[Any, Any] = {}
        for key, value in source.items():
            converted_value = engine.convert(value, value_tp)
            converted_key = engine.convert(key, key_tp)
            result[converted_key] = converted_value

        if target is dict:
            return result
        if issubclass(target, defaultdict):
            return target(getattr(source, "default_factory", None), result)
        return target(result)
