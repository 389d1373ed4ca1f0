from collections import namedtuple
from typing import Any, NamedTuple

import pytest

from elastic import NO_CONVERSION, ConverterEngine, IncompatibleTypesError, Int8, UInt16
from elastic.sequences import SequenceConverter, _element_type, _element_types


class Tags(list[str]):
    pass


class Scores(tuple[int, ...]):
    pass


@pytest.mark.parametrize(
    ("tp", "expected"),
    [
        (list[int], int),
        (set[str], str),
        (frozenset[bytes], bytes),
        (tuple[int, ...], int),
        (Tags, str),
        (list, Any),
        (tuple, Any),
    ],
)
def test_element_type(tp: Any, expected: Any) -> None:
    assert _element_type(tp) is expected


@pytest.mark.parametrize(
    ("tp", "expected"),
    [
        (tuple[int, str], (int, str)),
        (tuple[int], (int,)),
        (tuple[int, ...], None),
        (tuple, None),
        (Scores, None),
    ],
)
def test_element_types(tp: Any, expected: Any) -> None:
    assert _element_types(tp) == expected


@pytest.mark.parametrize(
    ("source", "target_tp", "expected"),
    [
        (["1", "2", "3"], list[int], [1, 2, 3]),
        (("1", "2"), list[Int8], [Int8(1), Int8(2)]),
        ([1, 2, 2, 3], set[str], {"1", "2", "3"}),
        ([1, 2], frozenset[int], frozenset({1, 2})),
        (["1", "2"], tuple[int, ...], (1, 2)),
        (["7", "x"], tuple[int, str], (7, "x")),
        ([1, 2], Tags, Tags(["1", "2"])),
        (["1", "2"], Scores, Scores((1, 2))),
        ([1, "a", None], list, [1, "a", None]),
        ([[1, 2], [3]], list[list[str]], [["1", "2"], ["3"]]),
        ([], list[int], []),
    ],
)
def test_sequence_conversion(source: Any, target_tp: Any, expected: Any) -> None:
    result = ConverterEngine().convert(source, target_tp)
    assert result == expected
    assert type(result) is type(expected)


def test_unparameterized_target_still_copies() -> None:
    source = [1, 2]
    result = ConverterEngine().convert(source, list[Any])
    assert result == source
    assert result is not source


def test_fixed_tuple_length_mismatch() -> None:
    with pytest.raises(IncompatibleTypesError, match="expects 2 elements, got 3"):
        ConverterEngine().convert([1, 2, 3], tuple[int, int])


def test_element_failure_aborts_conversion() -> None:
    with pytest.raises(ValueError):
        ConverterEngine().convert(["1", "oops", "3"], list[int])


def test_element_overflow_aborts_conversion() -> None:
    with pytest.raises(OverflowError):
        ConverterEngine().convert(["1", "70000"], list[UInt16])


def test_elements_are_converted_in_source_order() -> None:
    seen: list[Any] = []

    def record(source: Any, target_tp: Any) -> Any:
        seen.append(source)
        return len(source)

    engine = ConverterEngine()
    engine.add_source_converter(str, record)

    assert engine.convert(["a", "bb", "ccc"], list[int]) == [1, 2, 3]
    assert seen == ["a", "bb", "ccc"]


def test_elements_go_through_custom_converters() -> None:
    def spell_out(source: Any, target_tp: Any) -> Any:
        if not isinstance(source, str):
            return NO_CONVERSION
        return -1 if source == "minus" else 0

    engine = ConverterEngine()
    engine.add_target_converter(Int8, spell_out)

    assert engine.convert(["minus", "zero"], list[Int8]) == [Int8(-1), Int8(0)]


@pytest.mark.parametrize(
    ("source_tp", "target_tp", "expected"),
    [
        (list, tuple[int, ...], True),
        (Tags, set[str], True),
        (str, list[str], False),
        (bytes, list[int], False),
        (dict, list[str], False),
        (list, dict[int, int], False),
    ],
)
def test_sequence_converter_matches(source_tp: Any, target_tp: Any, expected: bool) -> None:
    assert SequenceConverter().matches(source_tp, target_tp) is expected


class Coordinate(NamedTuple):
    x: int
    y: Int8
    label: str = "origin"


Pair = namedtuple("Pair", ["left", "right"])


@pytest.mark.parametrize(
    ("source", "target_tp", "expected"),
    [
        (["1", "2"], Coordinate, Coordinate(1, Int8(2))),
        (("1", "-2", 3), Coordinate, Coordinate(1, Int8(-2), "3")),
        ([1, "a"], Pair, Pair(1, "a")),
    ],
)
def test_named_tuple_target(source: Any, target_tp: Any, expected: Any) -> None:
    result = ConverterEngine().convert(source, target_tp)
    assert result == expected
    assert type(result) is target_tp
    assert type(result[1]) is type(expected[1])


@pytest.mark.parametrize(
    ("source", "message"),
    [
        (["1"], "Coordinate expects 2 to 3 elements, got 1"),
        (["1", "2", "3", "4"], "Coordinate expects 2 to 3 elements, got 4"),
    ],
)
def test_named_tuple_length_mismatch(source: Any, message: str) -> None:
    with pytest.raises(IncompatibleTypesError, match=message):
        ConverterEngine().convert(source, Coordinate)


def test_named_tuple_without_defaults_requires_every_field() -> None:
    with pytest.raises(IncompatibleTypesError, match="Pair expects 2 elements, got 1"):
        ConverterEngine().convert([1], Pair)
