"""Audit logging of dispatched queries."""

from __future__ import annotations

import logging
import shlex

logger = logging.getLogger("core.audit")


def cmd_line(mode: str, pos: str, format: str, scope: str) -> str:
    """Render a query like the equivalent command-line invocation."""
    parts = ["pythia"]
    if format and format != "plain":
        parts.append(f"-format={shlex.quote(format)}")
    parts.append(f"-pos={shlex.quote(pos)}")
    parts.append(shlex.quote(mode))
    if scope:
        parts.append(scope)
    return " ".join(parts)


class LoggingAuditLog:
    """Append-only audit sink writing one log line per query."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def record(self, origin: str, mode: str, pos: str, format: str, scope: str) -> None:
        self.log.info("%s %s", origin or "-", cmd_line(mode, pos, format, scope))
