"""Helpers to locate the engine a CLI command operates on."""

from __future__ import annotations

import json
import sys
from importlib import import_module
from pathlib import Path
from typing import Any, Dict, Optional

from sagaflow.engine import WorkflowEngine


def _load_engine(target: str) -> WorkflowEngine:
    """Import ``module:attr`` and return the engine it names.

    ``attr`` may be a :class:`WorkflowEngine` instance or a zero-argument
    callable returning one. The current directory is importable.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected 'module:attribute', got {target!r}")

    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    module = import_module(module_name)
    try:
        obj: Any = getattr(module, attr)
    except AttributeError:
        raise ValueError(f"Module {module_name!r} has no attribute {attr!r}") from None

    if not isinstance(obj, WorkflowEngine) and callable(obj):
        obj = obj()
    if not isinstance(obj, WorkflowEngine):
        raise ValueError(f"{target} is not a WorkflowEngine")
    return obj


def _parse_data(raw: Optional[str]) -> Dict[str, Any]:
    if not raw:
        return {}
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("--data must be a JSON object")
    return data
