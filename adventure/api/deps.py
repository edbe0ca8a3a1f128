from __future__ import annotations

from adventure.infra.redis_client import create_redis
from adventure.session.registry import SessionRegistry

_REGISTRY: SessionRegistry | None = None


def get_registry() -> SessionRegistry:
    """Process-wide session registry (overridden in tests)."""

    global _REGISTRY
    if _REGISTRY is None:
        _REGISTRY = SessionRegistry(redis_factory=create_redis)
    return _REGISTRY


def reset_registry_for_tests() -> None:
    global _REGISTRY
    if _REGISTRY is not None:
        _REGISTRY.close_all()
    _REGISTRY = None
