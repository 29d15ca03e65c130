"""Registered workflow definitions."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..contracts import WorkflowDefinition
from ..errors import WorkflowNotFoundError

logger = logging.getLogger(__name__)


class WorkflowRegistry:
    """Maps workflow ids to definitions. Last registration wins."""

    def __init__(self) -> None:
        self._definitions: Dict[str, WorkflowDefinition] = {}

    def register(self, definition: WorkflowDefinition) -> None:
        if definition.id in self._definitions:
            logger.debug(
                f"Replacing workflow {definition.id} with version {definition.version}"
            )
        self._definitions[definition.id] = definition

    def get(self, definition_id: str) -> WorkflowDefinition:
        try:
            return self._definitions[definition_id]
        except KeyError:
            raise WorkflowNotFoundError(definition_id) from None

    def find(self, definition_id: str) -> Optional[WorkflowDefinition]:
        return self._definitions.get(definition_id)

    def definitions(self) -> List[WorkflowDefinition]:
        return list(self._definitions.values())

    def __contains__(self, definition_id: object) -> bool:
        return definition_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
