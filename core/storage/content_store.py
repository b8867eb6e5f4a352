import logging
from pathlib import Path

from core.access import ScopeSet
from core.errors import ContentUnavailableError

logger = logging.getLogger(__name__)


class FileContentStore:
    """Read file contents, but only for paths inside the scope.

    Nothing is cached: every call goes back to the file system.
    """

    def __init__(self, scope: ScopeSet):
        self.scope = scope

    def read(self, path: str) -> bytes:
        """Return the raw bytes of ``path``.

        Raises:
            ScopeViolationError: if ``path`` is not in scope (no I/O is attempted)
            ContentUnavailableError: if the file can't be read
        """
        self.scope.check(path)
        try:
            return Path(path).read_bytes()
        except OSError as e:
            logger.warning("⚠️  Cannot read %s: %s", path, e)
            raise ContentUnavailableError(path, e.strerror or str(e)) from e
