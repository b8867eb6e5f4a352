"""Translate textual line/column selections into byte ranges.

Columns count Unicode code points. Combining marks, zero-width joiners and
similar characters are each one column; there is no grapheme clustering.
Bytes that are not valid UTF-8 count as one column of one byte each.
"""
import logging
import re
from typing import List, Optional

from core.errors import SelectionError, SelectionParseError, SelectionRangeError
from core.models import ByteRange, Position, Selection

logger = logging.getLogger(__name__)

_SELECTION_RE = re.compile(r"([0-9]+)\.([0-9]+)-([0-9]+)\.([0-9]+)")


def parse_selection(s: str) -> Selection:
    """Parse a selection of the form ``line.col-line.col``, e.g. ``"24.4-25.10"``."""
    m = _SELECTION_RE.fullmatch(s)
    if m is None:
        raise SelectionParseError(f"invalid selection: {s!r}")
    l1, c1, l2, c2 = (int(g) for g in m.groups())
    if min(l1, c1, l2, c2) < 1:
        raise SelectionParseError(f"selection positions must be positive: {s!r}")
    return Selection(Position(l1, c1), Position(l2, c2))


def _line_starts(content: bytes) -> List[int]:
    starts = [0]
    i = content.find(b"\n")
    while i != -1:
        starts.append(i + 1)
        i = content.find(b"\n", i + 1)
    return starts


def _offset_of(pos: Position, content: bytes, starts: List[int]) -> int:
    if pos.line > len(starts):
        raise SelectionRangeError(f"line {pos.line} out of range (file has {len(starts)} lines)")
    begin = starts[pos.line - 1]
    end = starts[pos.line] - 1 if pos.line < len(starts) else len(content)
    line = content[begin:end].decode("utf-8", errors="surrogateescape")
    if pos.col - 1 > len(line):
        raise SelectionRangeError(f"column {pos.col} out of range on line {pos.line} ({len(line)} characters)")
    prefix = line[: pos.col - 1]
    return begin + len(prefix.encode("utf-8", errors="surrogateescape"))


def resolve_selection(selection: Selection, content: bytes) -> ByteRange:
    """Compute the byte range of ``selection`` within ``content``.

    Raises:
        SelectionRangeError: if a line or column lies outside the content, or
            the end position precedes the start position
    """
    starts = _line_starts(content)
    start = _offset_of(selection.start, content, starts)
    end = _offset_of(selection.end, content, starts)
    if end < start:
        raise SelectionRangeError(f"selection {selection} ends before it starts")
    return ByteRange(start, end)


def selection_range(s: Optional[str], content: bytes) -> Optional[ByteRange]:
    """Resolve an optional selection string, or return None if it can't be.

    Selection failures are cosmetic: the caller renders the file without a
    highlighted range instead of failing the request.
    """
    if not s:
        return None
    try:
        return resolve_selection(parse_selection(s), content)
    except SelectionError as e:
        logger.debug("Ignoring selection %r: %s", s, e)
        return None
