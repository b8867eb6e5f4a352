"""
Serialized access to the shared analysis engine.

The engine mutates internal caches while answering queries, so at most one
query may be in flight at any time. QueryDispatcher owns the engine handle
and is the only component that calls it.
"""
import logging
import threading
from typing import Optional

from core.errors import QueryError, QueryExecutionError
from core.models import AnalysisEngine, AuditSink, Query, QueryResult

logger = logging.getLogger(__name__)


class QueryDispatcher:
    """
    Run analysis queries one at a time against an injected engine.

    Usage:
        dispatcher = QueryDispatcher(engine, audit=LoggingAuditLog())
        result = dispatcher.execute(Query(mode="describe", pos="/proj/a.py:#10"))

    Blocked callers wait on a plain mutex; which of them runs next is up to
    the scheduler. There is no timeout: once a query has started it runs to
    completion.
    """

    def __init__(
        self,
        engine: AnalysisEngine,
        *,
        audit: Optional[AuditSink] = None,
        scope_description: str = "",
    ):
        self._engine = engine
        self._lock = threading.Lock()
        self.audit = audit
        self.scope_description = scope_description

    def execute(self, query: Query) -> QueryResult:
        """
        Execute a query under the engine lock.

        Args:
            query: Mode and position are forwarded to the engine verbatim

        Returns:
            The engine's result

        Raises:
            QueryError: If the engine rejects or fails the query
        """
        if self.audit is not None:
            self.audit.record(query.origin, query.mode, query.pos, query.format, self.scope_description)

        with self._lock:
            try:
                return self._engine.query(query.mode, query.pos)
            except QueryError:
                raise
            except Exception as e:
                logger.exception("❌ Engine failed on %s query at %s", query.mode, query.pos)
                raise QueryExecutionError(f"{query.mode} query failed: {e}") from e
