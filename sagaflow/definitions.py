"""Load workflow definitions from YAML files.

A file holds either a single definition mapping or a ``workflows`` list::

    workflows:
      - id: order
        name: Place order
        retry_policy: {max_attempts: 3, delay_ms: 500, backoff_multiplier: 2}
        steps:
          - id: reserve
            name: Reserve stock
            action_name: inventory.reserve
            compensation: {action_name: inventory.release}

Step conditions are Python callables and cannot be expressed in YAML.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Union

import yaml
from pydantic import ValidationError

from .contracts import WorkflowDefinition
from .errors import DefinitionLoadError


def parse_workflow_definitions(data: Any) -> List[WorkflowDefinition]:
    """Validate already-parsed YAML/JSON data into definitions."""
    if data is None:
        return []
    if isinstance(data, dict) and "workflows" in data:
        items = data["workflows"] or []
    elif isinstance(data, dict):
        items = [data]
    elif isinstance(data, list):
        items = data
    else:
        raise DefinitionLoadError(
            f"Expected a mapping or list of workflows, got {type(data).__name__}"
        )

    definitions = []
    for index, item in enumerate(items):
        try:
            definitions.append(WorkflowDefinition.model_validate(item))
        except ValidationError as e:
            raise DefinitionLoadError(f"Invalid workflow at index {index}: {e}") from e
    return definitions


def load_workflow_definitions(path: Union[str, Path]) -> List[WorkflowDefinition]:
    """Read and validate workflow definitions from ``path``."""
    path = Path(path)
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise DefinitionLoadError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise DefinitionLoadError(f"Invalid YAML in {path}: {e}") from e
    return parse_workflow_definitions(data)
