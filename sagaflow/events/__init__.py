"""Event bus factory and implementations."""

from __future__ import annotations

import os
from typing import Optional

from ..config import EngineConfig, load_config
from .base import EventBus
from .inmemory import InMemoryEventBus


def get_event_bus(
    backend: Optional[str] = None, config: Optional[EngineConfig] = None
) -> Optional[EventBus]:
    """Factory function to get the configured event bus.

    Returns ``None`` for the ``none`` backend; the engine then skips
    lifecycle notifications entirely.
    """

    config = config or load_config()
    backend = (
        backend
        or os.getenv("SAGAFLOW_EVENT_BUS")
        or config.event_bus.backend
    ).lower()

    if backend == "none":
        return None
    elif backend == "inmemory":
        return InMemoryEventBus(max_history=config.event_bus.max_history)
    elif backend == "redis":
        from .redis import RedisEventBus

        redis_conf = config.event_bus.redis
        return RedisEventBus(
            host=redis_conf.host,
            port=redis_conf.port,
            db=redis_conf.db,
            password=redis_conf.password,
            channel_prefix=redis_conf.channel_prefix,
        )
    else:
        raise ValueError(f"Unsupported event bus backend: {backend}")


__all__ = ["EventBus", "InMemoryEventBus", "get_event_bus"]
