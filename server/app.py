"""FastAPI application for Pythia.

The server owns the scope set, the content store and the query dispatcher;
the analysis engine is handed to the dispatcher when the server initializes
and is not reachable from anywhere else.

Preferred entrypoint:
- `src.app:app` (see `src/app.py`).
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request

from core.access import ScopeSet
from core.api import QueryDispatcher
from core.engine import EngineFactory, load_engine_factory
from core.errors import ContentUnavailableError, QueryError, ScopeViolationError
from core.ingestion import ScopeLoader
from core.models import Query
from core.rendering import format_source, render_index, render_source_page
from core.selection import selection_range
from core.storage import FileContentStore
from core.utils.audit import LoggingAuditLog
from core.utils.response_formatter import encode_result
from core.utils.settings import Settings

STATIC_DIR = Path(__file__).parent / "static"
DEFAULT_MODES = ["describe", "definition", "referrers"]


def configure_logging(level: int = logging.INFO) -> None:
    """Configure logging for the server."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        force=True,
    )
    logging.getLogger("core").setLevel(level)
    logging.getLogger("server").setLevel(level)


logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Server health status")
    ready: bool = Field(..., description="Whether the scope and engine are initialized")
    files: int = Field(..., description="Number of files in scope")


def forbidden() -> PlainTextResponse:
    return PlainTextResponse("Forbidden", status_code=403)


def not_found() -> PlainTextResponse:
    return PlainTextResponse("404 page not found", status_code=404)


class PythiaServer:
    """Encapsulates FastAPI app + scope/engine lifecycle."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        engine_factory: Optional[EngineFactory] = None,
        log_level: int = logging.INFO,
    ) -> None:
        configure_logging(log_level)
        self.settings = settings or Settings.from_env()
        self.engine_factory = engine_factory
        self.scope: Optional[ScopeSet] = None
        self.store: Optional[FileContentStore] = None
        self.dispatcher: Optional[QueryDispatcher] = None
        self.modes: List[str] = list(DEFAULT_MODES)

    @property
    def scope_description(self) -> str:
        return " ".join(self.settings.scope)

    def initialize(self) -> "PythiaServer":
        """Build the scope set, the content store and the engine, once.

        Returns:
            Self for method chaining
        """
        if self.dispatcher is not None:
            return self

        files = ScopeLoader(include_extensions=self.settings.include_extensions).load(self.settings.scope)
        self.scope = ScopeSet.from_paths(files)
        self.store = FileContentStore(self.scope)

        factory = self.engine_factory or load_engine_factory(self.settings.engine)
        engine = factory(self.scope, self.store)
        self.modes = list(getattr(engine, "modes", DEFAULT_MODES))

        audit = LoggingAuditLog() if self.settings.verbose else None
        self.dispatcher = QueryDispatcher(engine, audit=audit, scope_description=self.scope_description)
        logger.info("📂 %d files in scope: %s", len(self.scope), self.scope_description)
        return self

    def is_initialized(self) -> bool:
        return self.dispatcher is not None

    @asynccontextmanager
    async def lifespan(self, app: FastAPI) -> AsyncIterator[None]:
        """Lifespan event handler for startup and shutdown."""
        logger.info("=" * 70)
        logger.info("🚀 PYTHIA SERVER STARTING")
        logger.info("=" * 70)

        try:
            await run_in_threadpool(self.initialize)
            logger.info("✅ Server ready!")
        except Exception as e:
            logger.error(f"❌ Failed to initialize: {e}")
            # Continue anyway - requests get 503 until ready.

        yield

        logger.info("👋 Server shutting down...")

    def create_app(self) -> FastAPI:
        """Create and configure a FastAPI application instance."""
        app = FastAPI(
            title="Pythia",
            description="Browse in-scope source files and query the analysis engine",
            version="1.0.0",
            lifespan=self.lifespan,
        )
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

        def require_ready() -> tuple[ScopeSet, FileContentStore, QueryDispatcher]:
            if self.scope is None or self.store is None or self.dispatcher is None:
                raise HTTPException(status_code=503, detail="Server not initialized.")
            return self.scope, self.store, self.dispatcher

        @app.get("/", response_class=HTMLResponse, tags=["Pages"])
        async def index() -> HTMLResponse:
            scope, _, _ = require_ready()
            return HTMLResponse(render_index(self.scope_description, scope))

        @app.get("/health", response_model=HealthResponse, tags=["General"])
        async def health_check() -> HealthResponse:
            return HealthResponse(
                status="healthy",
                ready=self.is_initialized(),
                files=len(self.scope) if self.scope is not None else 0,
            )

        @app.get("/source", tags=["Pages"])
        async def source(file: str = "") -> Response:
            scope, _, _ = require_ready()
            if not scope.contains(file):
                return forbidden()
            return HTMLResponse(render_source_page(file, self.modes))

        @app.get("/file", tags=["Files"])
        def file_fragment(path: str = "", s: str = "") -> Response:
            _, store, _ = require_ready()
            try:
                content = store.read(path)
            except ScopeViolationError:
                return forbidden()
            except ContentUnavailableError as e:
                logger.warning("⚠️  %s", e)
                return not_found()

            sel = selection_range(s, content)
            return HTMLResponse(format_source(content, sel, highlight_comments=path.endswith(".py")))

        @app.get("/query", tags=["Query"])
        async def query(request: Request, mode: str = "", pos: str = "", format: str = "") -> Response:
            _, _, dispatcher = require_ready()
            origin = f"{request.client.host}:{request.client.port}" if request.client else ""
            q = Query(mode=mode, pos=pos, format=format, origin=origin)
            try:
                result = await run_in_threadpool(dispatcher.execute, q)
            except QueryError as e:
                logger.info("🔍 %s query failed: %s", mode, e)
                return PlainTextResponse(str(e))

            body = encode_result(result, format)
            media_type = "application/json" if format == "json" else "text/plain; charset=utf-8"
            return Response(content=body, media_type=media_type)

        @app.exception_handler(404)
        async def not_found_handler(request: Request, exc: Exception) -> PlainTextResponse:
            return not_found()

        @app.exception_handler(500)
        async def internal_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
            logger.exception("Internal server error")
            return PlainTextResponse("Internal Server Error", status_code=500)

        return app
