"""Lazy-loading registry of extraction strategies.

Global singleton per strategy, created and loaded on first use.
"""

import logging

from services.pipeline.base import BaseExtractionStrategy

logger = logging.getLogger(__name__)

_registry: dict[str, BaseExtractionStrategy] = {}


def _create_strategy(name: str) -> BaseExtractionStrategy:
    """Factory: create a strategy by name with deferred imports."""
    if name == "ai":
        from services.pipeline.ai_strategy import AIStrategy
        return AIStrategy()
    elif name == "ner":
        from services.pipeline.ner_strategy import NERStrategy
        return NERStrategy()
    else:
        raise ValueError(f"Unknown strategy: {name}")


def get_strategy(name: str) -> BaseExtractionStrategy:
    """Get a strategy by name, creating and loading it on first access."""
    if name not in _registry:
        _registry[name] = _create_strategy(name)
    strategy = _registry[name]
    strategy.ensure_loaded()
    return strategy


def preload(*names: str) -> None:
    """Pre-load strategies (e.g. at startup)."""
    for name in names:
        get_strategy(name)


def clear() -> None:
    """Drop all strategies. Useful for testing."""
    _registry.clear()
