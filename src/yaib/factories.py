"""
yaib Factories

This module turns decoded recipe entries into concrete Action objects.

YAML carries no type information, so each entry is decoded twice: once
into ActionHeader to read its tag, then into the class the tag selects.
"""

from typing import Any, Dict, List
import logging

from pydantic import ValidationError

from .abstractions import Action, ActionHeader
from .exceptions import RecipeValidationError, UnknownActionError
from .registry import action_registry, initialize_registries

logger = logging.getLogger(__name__)


class ActionFactory:
    """
    Factory creates the Action matching an entry's tag.
    Uses reflection-based registry for dynamic action discovery.
    """
    def __init__(self):
        if not action_registry.registry:
            initialize_registries()

        logger.debug("ActionFactory initialized with reflection-based registry.")

    def create(self, entry: Dict[str, Any], index: int = 0) -> Action:
        """
        Decode one recipe entry into its concrete action.

        Args:
            entry: the entry as decoded from YAML
            index: the entry's position in the recipe, for error messages
        Returns:
            the populated Action instance
        """
        if not isinstance(entry, dict):
            raise RecipeValidationError(f"Action #{index} must be a mapping, got {type(entry).__name__}.")

        try:
            header = ActionHeader.model_validate(entry)
        except ValidationError as e:
            raise RecipeValidationError(f"Action #{index} is missing its 'action' tag:\n{e}")

        action_class = action_registry.action(header.action)
        if action_class is None:
            raise UnknownActionError(
                f"Unknown action: {header.action} (entry #{index}). "
                f"Supported actions: {sorted(action_registry.get_supports())}"
            )

        logger.debug(f"Decoding action #{index} '{header.action}' as {action_class.__name__}.")
        try:
            return action_class.model_validate(entry)
        except ValidationError as e:
            raise RecipeValidationError(f"Action #{index} ('{header.description or header.action}') is invalid:\n{e}")

    def create_all(self, entries: List[Dict[str, Any]]) -> List[Action]:
        return [self.create(entry, index) for index, entry in enumerate(entries)]
