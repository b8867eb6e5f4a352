"""Data models and collaborator protocols"""
from .models import (
    AnalysisEngine,
    AuditSink,
    ByteRange,
    Position,
    Query,
    QueryResult,
    Selection,
)

__all__ = [
    "AnalysisEngine",
    "AuditSink",
    "ByteRange",
    "Position",
    "Query",
    "QueryResult",
    "Selection",
]
