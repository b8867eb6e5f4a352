from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Protocol


@dataclass(frozen=True)
class Position:
    """A 1-based line/column position in a file's text."""

    line: int
    col: int

    def __str__(self) -> str:
        return f"{self.line}.{self.col}"


@dataclass(frozen=True)
class Selection:
    start: Position
    end: Position

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass(frozen=True)
class ByteRange:
    """Half-open range ``[start, end)`` into a file's raw bytes."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end:
            raise ValueError(f"invalid byte range [{self.start}, {self.end})")


@dataclass(frozen=True)
class Query:
    mode: str
    pos: str
    format: str = "plain"
    origin: str = ""


# The two renderings the core consumes from an engine result
class QueryResult(Protocol):
    def to_serializable(self) -> Dict[str, Any]: ...
    def to_text(self) -> str: ...


# Only QueryDispatcher may hold a reference to an engine instance
class AnalysisEngine(Protocol):
    def query(self, mode: str, pos: str) -> QueryResult: ...


class AuditSink(Protocol):
    def record(self, origin: str, mode: str, pos: str, format: str, scope: str) -> None: ...
