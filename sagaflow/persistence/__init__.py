"""Execution record storage for sagaflow."""

from __future__ import annotations

from .inmemory import InMemoryExecutionStore
from .repository import ExecutionStore

__all__ = ["ExecutionStore", "InMemoryExecutionStore"]
