import yaml
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .abstractions import Action
from .factories import ActionFactory
from .preprocess import Preprocessor
from .exceptions import (
    RecipeFileMissingError,
    RecipeParsingError,
    RecipeValidationError,
)

logger = logging.getLogger(__name__)


class RecipeModel(BaseModel):
    """
        Class Recipe-Validation Model describing the top level of a recipe
    """
    model_config = ConfigDict(extra="forbid")

    architecture: str
    actions: List[Dict[str, Any]] = Field(default_factory=list)


class Recipe:
    """
    An architecture plus the ordered actions to run for it.

    The sequence is fixed at construction; actions may keep internal state
    between phases but are never added, removed or reordered.
    """
    def __init__(self, architecture: str, actions: Sequence[Action]):
        self._architecture = architecture
        self._actions: Tuple[Action, ...] = tuple(actions)

    @property
    def architecture(self) -> str:
        return self._architecture

    @property
    def actions(self) -> Tuple[Action, ...]:
        return self._actions

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self):
        return iter(self._actions)

    @classmethod
    def from_text(cls, text: str, variables: Optional[Dict[str, str]] = None, name: str = "<recipe>") -> "Recipe":
        """Render, parse and decode recipe text into a Recipe."""
        rendered = Preprocessor(variables).run(text, name)

        try:
            data = yaml.safe_load(rendered)
        except yaml.YAMLError as e:
            raise RecipeParsingError(f"Error parsing YAML recipe '{name}': {e}")
        if not isinstance(data, dict):
            raise RecipeParsingError(f"Recipe '{name}' must be a YAML document containing a dictionary.")
        logger.debug(f"Successfully parsed YAML from '{name}'.")

        try:
            model = RecipeModel.model_validate(data)
        except ValidationError as e:
            raise RecipeValidationError(f"Recipe validation failed:\n{e}")

        actions = ActionFactory().create_all(model.actions)
        logger.info(f"Recipe '{name}' loaded: {len(actions)} actions for {model.architecture}.")
        return cls(model.architecture, actions)

    @classmethod
    def load(cls, path: Path, variables: Optional[Dict[str, str]] = None) -> "Recipe":
        """Load a recipe file. Template errors surface before any action is built."""
        logger.info(f"Loading recipe from '{path}'...")
        try:
            text = Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            raise RecipeFileMissingError(f"Recipe file not found at: {path}")
        return cls.from_text(text, variables, name=Path(path).name)
