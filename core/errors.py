"""Error hierarchy for the Pythia core.

The three branches are propagated differently and must stay separate:

- ``AccessError`` is a hard failure: the request is rejected with a
  distinct status code and no file I/O happens after a scope violation.
- ``SelectionError`` is soft: the caller drops the selection and renders
  the file without a highlighted range.
- ``QueryError`` ends the request, but its message is the response body
  and the transport still reports success.
"""


class PythiaError(Exception):
    """Base class for all errors raised by the core."""


class AccessError(PythiaError):
    """A file could not be accessed."""


class ScopeViolationError(AccessError):
    """The requested path is not in the scope set."""

    def __init__(self, path: str):
        super().__init__(f"path not in scope: {path!r}")
        self.path = path


class ContentUnavailableError(AccessError):
    """An in-scope file could not be read from storage."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class SelectionError(PythiaError):
    """A selection string could not be turned into a byte range."""


class SelectionParseError(SelectionError):
    pass


class SelectionRangeError(SelectionError):
    pass


class QueryError(PythiaError):
    """The analysis engine rejected or failed a query."""


class QueryMalformedError(QueryError):
    pass


class QueryExecutionError(QueryError):
    pass
