import pytest

from core.errors import SelectionParseError, SelectionRangeError
from core.models import ByteRange, Position, Selection
from core.selection import parse_selection, resolve_selection, selection_range

CONTENT = b"ab\ncd\n"


def test_parse_selection():
    assert parse_selection("24.4-25.10") == Selection(Position(24, 4), Position(25, 10))


@pytest.mark.parametrize(
    "s",
    ["abc", "", "1.1", "1.1-2", "1.1-2.2x", " 1.1-2.2", "1.1-2.2 ", "1.1-2.2\n", "0.1-1.1", "1.0-1.1", "-1.1-1.1", "1.1--2.2", "١.1-1.1"],
)
def test_parse_selection_rejects(s):
    with pytest.raises(SelectionParseError):
        parse_selection(s)


def test_resolve_first_line():
    assert resolve_selection(parse_selection("1.1-1.2"), CONTENT) == ByteRange(0, 1)


def test_resolve_second_line():
    assert resolve_selection(parse_selection("2.1-2.3"), CONTENT) == ByteRange(3, 5)


def test_resolve_across_lines():
    assert resolve_selection(parse_selection("1.2-2.2"), CONTENT) == ByteRange(1, 4)


def test_column_just_past_last_character_is_valid():
    assert resolve_selection(parse_selection("1.3-1.3"), CONTENT) == ByteRange(2, 2)


def test_column_beyond_line_end():
    with pytest.raises(SelectionRangeError):
        resolve_selection(parse_selection("1.4-1.4"), CONTENT)


def test_line_beyond_file():
    with pytest.raises(SelectionRangeError):
        resolve_selection(parse_selection("5.1-5.2"), CONTENT)


def test_end_before_start():
    with pytest.raises(SelectionRangeError):
        resolve_selection(parse_selection("2.1-1.1"), CONTENT)


def test_columns_count_code_points():
    content = "héllo = '€'\n".encode("utf-8")

    # "h" is one byte, "é" two, "€" three
    assert resolve_selection(parse_selection("1.2-1.3"), content) == ByteRange(1, 3)
    assert resolve_selection(parse_selection("1.10-1.11"), content) == ByteRange(10, 13)


def test_combining_marks_are_separate_columns():
    content = "éx".encode("utf-8")

    assert resolve_selection(parse_selection("1.2-1.3"), content) == ByteRange(1, 3)


def test_invalid_utf8_counts_one_byte_per_column():
    content = b"a\xffb\n"

    assert resolve_selection(parse_selection("1.3-1.4"), content) == ByteRange(2, 3)


def test_selection_range_degrades_to_none():
    assert selection_range("abc", CONTENT) is None
    assert selection_range("5.1-5.2", CONTENT) is None
    assert selection_range("", CONTENT) is None
    assert selection_range(None, CONTENT) is None
    assert selection_range("2.1-2.3", CONTENT) == ByteRange(3, 5)
