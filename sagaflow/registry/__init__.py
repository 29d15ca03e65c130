"""Instance-owned registries for actions and workflow definitions.

There is no module-level registry: each engine owns (or is handed) its own
registries so several engines can coexist in one process.
"""

from __future__ import annotations

from .actions import ActionRegistry
from .workflows import WorkflowRegistry

__all__ = ["ActionRegistry", "WorkflowRegistry"]
