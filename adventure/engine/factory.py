from __future__ import annotations

import importlib
import logging

from adventure.engine.adapter import EngineAdapter
from adventure.engine.base import NarrativeEngine

logger = logging.getLogger(__name__)


def load_engine(path: str) -> NarrativeEngine:
    """Import and instantiate an engine from a "package.module:factory" path."""

    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Engine path must look like 'package.module:factory', got {path!r}")

    module = importlib.import_module(module_name)
    factory = getattr(module, attr, None)
    if factory is None:
        raise ValueError(f"{module_name!r} has no attribute {attr!r}")
    if not callable(factory):
        raise ValueError(f"{path!r} is not callable")
    return factory()


def create_engine_adapter(engine_path: str | None) -> EngineAdapter:
    """Build an adapter for the configured engine.

    A missing or broken engine never raises here; the adapter carries the reason
    in `error` and stays uninitialized.
    """

    if not engine_path:
        return EngineAdapter(None, load_error="No narrative engine configured (set ADVENTURE_ENGINE)")

    try:
        engine = load_engine(engine_path)
    except Exception as e:
        logger.warning("Failed to load narrative engine %r: %s", engine_path, e)
        return EngineAdapter(None, load_error=f"Failed to load engine {engine_path!r}: {e}")

    return EngineAdapter(engine)
