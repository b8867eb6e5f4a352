import importlib
import logging
from typing import Callable, Optional

from core.access import ScopeSet
from core.models import AnalysisEngine
from core.storage import FileContentStore
from .source_engine import SourceEngine

logger = logging.getLogger(__name__)

EngineFactory = Callable[[ScopeSet, FileContentStore], AnalysisEngine]


def load_engine_factory(spec: Optional[str] = None) -> EngineFactory:
    """Return the engine factory named by ``module:attribute``, or the built-in one.

    The factory is called with the scope set and a content store bound to it.
    """
    if not spec:
        return SourceEngine
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"invalid engine spec {spec!r}: want 'module:factory'")
    module = importlib.import_module(module_name)
    try:
        factory = getattr(module, attr)
    except AttributeError as e:
        raise ValueError(f"module {module_name!r} has no attribute {attr!r}") from e
    logger.info("🔌 Using analysis engine %s", spec)
    return factory
