"""Encoding of analysis results into response payloads."""

from __future__ import annotations
import json
import logging

from core.models import QueryResult

logger = logging.getLogger(__name__)


def encode_result(result: QueryResult, format: str) -> bytes:
    """Encode a query result as JSON or as its canonical text.

    Only ``"json"`` is recognized; ``"plain"`` and any unknown format fall back
    to the text rendering. If the result can't be rendered in either form,
    the error message is written as the payload instead of being raised.
    """
    try:
        if format == "json":
            return json.dumps(result.to_serializable()).encode("utf-8")
        return result.to_text().encode("utf-8")
    except Exception as e:
        logger.exception("Failed to encode %s result as %r", type(result).__name__, format or "plain")
        return str(e).encode("utf-8")
