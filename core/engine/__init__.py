"""Built-in analysis engine and engine loading"""
from .factory import EngineFactory, load_engine_factory
from .position import QueryPos, parse_query_pos
from .result import AnalysisResult
from .source_engine import SourceEngine

__all__ = [
    "AnalysisResult",
    "EngineFactory",
    "QueryPos",
    "SourceEngine",
    "load_engine_factory",
    "parse_query_pos",
]
