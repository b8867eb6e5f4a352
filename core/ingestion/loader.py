import logging
from pathlib import Path
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_DIRS = frozenset({'.git', '__pycache__', 'node_modules', '.venv', 'venv', 'dist', 'build', '.tox'})


class ScopeLoader:
    """Expand scope arguments (files and directories) into absolute file paths."""

    def __init__(self, include_extensions: Optional[List[str]] = None, exclude_dirs: Optional[Iterable[str]] = None):
        self.include_extensions = [e.lower().lstrip('.') for e in include_extensions] if include_extensions else ['py']
        self.exclude_dirs = frozenset(exclude_dirs) if exclude_dirs is not None else DEFAULT_EXCLUDE_DIRS

    def _is_excluded(self, path: Path, root: Path) -> bool:
        parts = {p.lower() for p in path.relative_to(root).parts[:-1]}
        return bool(parts & self.exclude_dirs)

    def _is_included(self, path: Path) -> bool:
        return path.suffix.lower().lstrip('.') in self.include_extensions

    def load(self, args: Iterable[str]) -> List[str]:
        """Resolve each argument and collect the matching files beneath it.

        Files named explicitly are kept whatever their extension; directories are
        walked recursively. Arguments that don't exist are skipped with a warning.
        The returned paths are absolute with symlinks resolved, so request paths
        must be given in the same form.
        """
        files: List[str] = []
        for arg in args:
            root = Path(arg).expanduser().resolve()
            if root.is_file():
                files.append(str(root))
                continue
            if not root.is_dir():
                logger.warning("⚠️  Skipping missing scope argument: %s", arg)
                continue

            logger.info("🔄 Loading scope from: %s", root)
            count = 0
            for path in root.rglob('*'):
                if not path.is_file():
                    continue
                if self._is_excluded(path, root):
                    continue
                if not self._is_included(path):
                    continue
                files.append(str(path.resolve()))
                count += 1
            logger.info("✅ Found %d files under %s", count, root)

        return files
