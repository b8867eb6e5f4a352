import re
from dataclasses import dataclass

from core.errors import QueryMalformedError

_POS_RE = re.compile(r"(?P<path>.+):#(?P<start>[0-9]+)(?:,#(?P<end>[0-9]+))?")


@dataclass(frozen=True)
class QueryPos:
    """A file and a byte range within it, as named by a position token."""

    path: str
    start: int
    end: int

    def __str__(self) -> str:
        if self.start == self.end:
            return f"{self.path}:#{self.start}"
        return f"{self.path}:#{self.start},#{self.end}"


def parse_query_pos(pos: str) -> QueryPos:
    """Parse ``/path/to/file.py:#START`` or ``/path/to/file.py:#START,#END``."""
    m = _POS_RE.fullmatch(pos)
    if m is None:
        raise QueryMalformedError(f"invalid position {pos!r}: want FILE:#START or FILE:#START,#END")
    start = int(m.group("start"))
    end = int(m.group("end")) if m.group("end") is not None else start
    if end < start:
        raise QueryMalformedError(f"invalid position {pos!r}: end precedes start")
    return QueryPos(m.group("path"), start, end)
