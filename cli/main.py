"""
CLI Application Logic

Parses the command line, builds the server for the given scope and runs it.
"""
import argparse
import dataclasses
import logging
import threading
import webbrowser
from typing import List, Optional, Tuple

import uvicorn

from core.utils.settings import Settings
from server.app import PythiaServer

logger = logging.getLogger(__name__)


def parse_addr(addr: str, default_host: str) -> Tuple[str, int]:
    """Split a ``host:port`` address; an empty host means ``default_host``."""
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid address {addr!r}: want HOST:PORT or :PORT")
    return host or default_host, int(port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pythia",
        description="Browse Python sources and query the analysis engine from a web browser.",
    )
    parser.add_argument("-http", dest="http", default=None, help="HTTP service address, e.g. ':8080' (default from SERVER_HOST/SERVER_PORT)")
    parser.add_argument("-open", dest="open", action="store_true", help="open a browser window once the server is up")
    parser.add_argument("-v", dest="verbose", action="store_true", help="log every query like the equivalent command line")
    parser.add_argument("-engine", dest="engine", default=None, help="analysis engine factory as 'module:attribute'")
    parser.add_argument("-ext", dest="extensions", default=None, help="comma-separated file extensions to include (default 'py')")
    parser.add_argument("scope", nargs="*", help="files and directories making up the scope")
    return parser


def settings_from_args(args: argparse.Namespace, base: Settings) -> Settings:
    """Overlay command-line flags on environment settings."""
    changes = {}
    if args.scope:
        changes["scope"] = list(args.scope)
    if args.extensions:
        changes["include_extensions"] = [e.strip() for e in args.extensions.split(",") if e.strip()]
    if args.http:
        changes["host"], changes["port"] = parse_addr(args.http, base.host)
    if args.verbose:
        changes["verbose"] = True
    if args.engine:
        changes["engine"] = args.engine
    return dataclasses.replace(base, **changes)


def main(argv: Optional[List[str]] = None) -> int:
    """Default CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = settings_from_args(args, Settings.from_env())
    except ValueError as e:
        parser.error(str(e))

    logger.info("=" * 70)
    logger.info("🚀 PYTHIA")
    logger.info("=" * 70)

    server = PythiaServer(settings)
    try:
        server.initialize()
    except (ImportError, ValueError) as e:
        logger.error("❌ Cannot load analysis engine: %s", e)
        return 1
    if server.scope is None or len(server.scope) == 0:
        logger.error("❌ No files in scope: %s", server.scope_description)
        return 1

    url = f"http://{settings.host}:{settings.port}/"
    logger.info("🌐 Serving on %s", url)
    if args.open:
        threading.Timer(1.0, webbrowser.open, args=(url,)).start()

    uvicorn.run(server.create_app(), host=settings.host, port=settings.port, log_level="info")
    return 0
