"""
Core Module - Pythia query core

This is a pure library module with NO CLI or server code.
Import this in your CLI, server, or any other application.

Usage:
    from core import QueryDispatcher, ScopeSet, SourceEngine

    scope = ScopeSet.from_paths(ScopeLoader().load(["./myproject"]))
    dispatcher = QueryDispatcher(SourceEngine(scope))
    result = dispatcher.execute(Query(mode="describe", pos="/abs/file.py:#120"))
"""

from core.access import ScopeSet
from core.api import QueryDispatcher
from core.engine import SourceEngine
from core.ingestion import ScopeLoader
from core.models import Query
from core.storage import FileContentStore

__all__ = ["FileContentStore", "Query", "QueryDispatcher", "ScopeLoader", "ScopeSet", "SourceEngine"]
