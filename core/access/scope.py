import logging
from bisect import bisect_left
from typing import Iterable, Iterator, Tuple

from core.errors import ScopeViolationError

logger = logging.getLogger(__name__)


class ScopeSet:
    """Immutable, sorted set of the file paths that may be read or analyzed.

    Membership is an exact string match found by binary search. No path
    normalization happens here: symlinks, case and ``..`` segments are the
    caller's business, both when the set is built and at lookup time.

    Usage:
        scope = ScopeSet.from_paths(["/proj/b.py", "/proj/a.py"])
        "/proj/a.py" in scope        # True
        scope.check("/proj/c.py")    # raises ScopeViolationError
    """

    __slots__ = ("_paths",)

    def __init__(self, paths: Tuple[str, ...] = ()):
        if any(a >= b for a, b in zip(paths, paths[1:])):
            raise ValueError("scope paths must be strictly ascending; use ScopeSet.from_paths()")
        object.__setattr__(self, "_paths", tuple(paths))

    @classmethod
    def from_paths(cls, paths: Iterable[str]) -> "ScopeSet":
        """Deduplicate and sort ``paths`` into a new scope set."""
        scope = cls(tuple(sorted(set(paths))))
        logger.debug("Scope initialized with %d files", len(scope))
        return scope

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ScopeSet is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("ScopeSet is immutable")

    def contains(self, path: str) -> bool:
        i = bisect_left(self._paths, path)
        return i < len(self._paths) and self._paths[i] == path

    def check(self, path: str) -> None:
        """Raise ScopeViolationError unless ``path`` is in the scope."""
        if not self.contains(path):
            raise ScopeViolationError(path)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.contains(path)

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __repr__(self) -> str:
        return f"ScopeSet({len(self._paths)} files)"

    @property
    def paths(self) -> Tuple[str, ...]:
        return self._paths
