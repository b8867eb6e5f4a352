"""
Default analysis engine for Python sources.

Answers a small set of syntactic queries from the ``ast`` of the file named
by the position token. Parsed modules are cached on first use and the cache
is not synchronized, so calls must be serialized by QueryDispatcher.
"""
import ast
import logging
from bisect import bisect_right
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from core.access import ScopeSet
from core.engine.position import QueryPos, parse_query_pos
from core.engine.result import AnalysisResult
from core.errors import AccessError, QueryExecutionError, QueryMalformedError
from core.storage import FileContentStore

logger = logging.getLogger(__name__)

_DEFINITIONS = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)


class ParsedModule:
    """A parsed source file plus the tables needed to map offsets to nodes."""

    def __init__(self, path: str, content: bytes, tree: ast.Module):
        self.path = path
        self.content = content
        self.tree = tree
        self.line_starts = [0]
        for i, b in enumerate(content):
            if b == 0x0A:
                self.line_starts.append(i + 1)

    def offset(self, lineno: int, col_offset: int) -> int:
        # ast columns are UTF-8 byte offsets
        return self.line_starts[lineno - 1] + col_offset

    def node_range(self, node: ast.AST) -> Optional[Tuple[int, int]]:
        end_lineno = getattr(node, "end_lineno", None)
        if not hasattr(node, "lineno") or end_lineno is None:
            return None
        return self.offset(node.lineno, node.col_offset), self.offset(end_lineno, node.end_col_offset)

    def position(self, offset: int) -> str:
        """Format a byte offset as a 1-based ``line.col`` with code point columns."""
        line = bisect_right(self.line_starts, offset)
        start = self.line_starts[line - 1]
        col = len(self.content[start:offset].decode("utf-8", errors="surrogateescape")) + 1
        return f"{line}.{col}"

    def span(self, node: ast.AST) -> str:
        start, end = self.node_range(node)
        return f"{self.path}:{self.position(start)}-{self.position(end)}"

    def nodes(self) -> Iterator[Tuple[ast.AST, int, int]]:
        for node in ast.walk(self.tree):
            r = self.node_range(node)
            if r is not None:
                yield node, r[0], r[1]


def _identifier(node: ast.AST) -> Optional[str]:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    if isinstance(node, _DEFINITIONS):
        return node.name
    if isinstance(node, ast.arg):
        return node.arg
    if isinstance(node, ast.alias):
        return node.asname or node.name.split(".")[0]
    return None


def _binds(node: ast.AST, name: str) -> bool:
    if isinstance(node, ast.Name):
        return isinstance(node.ctx, ast.Store) and node.id == name
    if isinstance(node, (*_DEFINITIONS, ast.arg, ast.alias)):
        return _identifier(node) == name
    return False


class SourceEngine:
    """
    Syntactic query engine over the in-scope Python files.

    Supported modes:
        describe:   the innermost syntax node enclosing the position
        definition: the first binding of the identifier at the position
        referrers:  every use of the identifier at the position in its module
    """

    def __init__(self, scope: ScopeSet, store: Optional[FileContentStore] = None):
        self.scope = scope
        self.store = store or FileContentStore(scope)
        self._modules: Dict[str, ParsedModule] = {}
        self._modes: Dict[str, Callable[[ParsedModule, QueryPos], AnalysisResult]] = {
            "describe": self.describe,
            "definition": self.definition,
            "referrers": self.referrers,
        }

    @property
    def modes(self) -> List[str]:
        return sorted(self._modes)

    def query(self, mode: str, pos: str) -> AnalysisResult:
        handler = self._modes.get(mode)
        if handler is None:
            raise QueryMalformedError(f"invalid mode: {mode!r} (want one of {', '.join(self.modes)})")
        qpos = parse_query_pos(pos)
        if qpos.path not in self.scope:
            raise QueryMalformedError(f"no file {qpos.path!r} in the analysis scope")
        module = self._module(qpos.path)
        if qpos.end > len(module.content):
            raise QueryMalformedError(f"position {qpos} is beyond the end of the file")
        return handler(module, qpos)

    def _module(self, path: str) -> ParsedModule:
        module = self._modules.get(path)
        if module is not None:
            return module
        try:
            content = self.store.read(path)
        except AccessError as e:
            raise QueryExecutionError(str(e)) from e
        try:
            tree = ast.parse(content, filename=path)
        except (SyntaxError, ValueError) as e:
            raise QueryExecutionError(f"{path}: cannot parse: {e}") from e
        logger.debug("Parsed %s", path)
        module = ParsedModule(path, content, tree)
        self._modules[path] = module
        return module

    def _enclosing(self, module: ParsedModule, qpos: QueryPos) -> ast.AST:
        best: Optional[ast.AST] = None
        best_size = None
        for node, start, end in module.nodes():
            if start <= qpos.start and qpos.end <= end and (best_size is None or end - start <= best_size):
                best, best_size = node, end - start
        if best is None:
            raise QueryMalformedError(f"no syntax node encloses {qpos}")
        return best

    def _selected_identifier(self, module: ParsedModule, qpos: QueryPos) -> str:
        node = self._enclosing(module, qpos)
        name = _identifier(node)
        if name is None:
            raise QueryMalformedError(f"no identifier selected at {qpos} ({type(node).__name__})")
        return name

    def describe(self, module: ParsedModule, qpos: QueryPos) -> AnalysisResult:
        node = self._enclosing(module, qpos)
        kind = type(node).__name__
        name = _identifier(node)
        span = module.span(node)
        text = f"{span}: {kind} {name}" if name else f"{span}: {kind}"
        return AnalysisResult(
            mode="describe",
            pos=str(qpos),
            payload={"kind": kind, "name": name, "span": span},
            lines=[text],
        )

    def definition(self, module: ParsedModule, qpos: QueryPos) -> AnalysisResult:
        name = self._selected_identifier(module, qpos)
        bindings = sorted(
            ((start, node) for node, start, _ in module.nodes() if _binds(node, name)),
            key=lambda item: item[0],
        )
        if not bindings:
            raise QueryExecutionError(f"no definition of {name!r} found in {module.path}")
        node = bindings[0][1]
        span = module.span(node)
        return AnalysisResult(
            mode="definition",
            pos=str(qpos),
            payload={"name": name, "kind": type(node).__name__, "span": span},
            lines=[f"{span}: defined here as {type(node).__name__} {name}"],
        )

    def referrers(self, module: ParsedModule, qpos: QueryPos) -> AnalysisResult:
        name = self._selected_identifier(module, qpos)
        refs = sorted(
            (start, module.span(node))
            for node, start, _ in module.nodes()
            if isinstance(node, (ast.Name, ast.Attribute)) and _identifier(node) == name
        )
        spans = [span for _, span in refs]
        return AnalysisResult(
            mode="referrers",
            pos=str(qpos),
            payload={"name": name, "refs": spans},
            lines=[f"{len(spans)} references to {name}"] + [f"{span}: reference" for span in spans],
        )
