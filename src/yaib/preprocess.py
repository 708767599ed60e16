import logging
from typing import Dict, Optional

import jinja2
from jinja2 import Environment, StrictUndefined

from . import constants
from .exceptions import TemplateError

logger = logging.getLogger(__name__)


def sector(count: int) -> int:
    """Convert a sector count into a byte count."""
    return int(count) * constants.SECTOR_SIZE


class Preprocessor:
    """
    Renders the raw recipe text as a Jinja2 template.

    Template variables are substituted verbatim; `sector` is available both
    as a function (`{{ sector(2048) }}`) and as a filter (`{{ 2048 | sector }}`).
    Rendering happens exactly once, before the text is parsed as YAML.
    """
    def __init__(self, variables: Optional[Dict[str, str]] = None):
        self.variables = dict(variables or {})
        self.jinja_env = Environment(undefined=StrictUndefined, keep_trailing_newline=True)
        self.jinja_env.globals["sector"] = sector
        self.jinja_env.filters["sector"] = sector

    def run(self, text: str, name: str = "<recipe>") -> str:
        logger.info(f"Rendering recipe template: {name}")
        logger.debug(f"Template variables: {self.variables}")
        try:
            rendered = self.jinja_env.from_string(text).render(self.variables)
        except jinja2.TemplateError as e:
            raise TemplateError(f"Failed to render recipe template '{name}': {e}") from e
        except (TypeError, ValueError) as e:
            raise TemplateError(f"Template helper failed in '{name}': {e}") from e
        logger.debug(f"Rendered recipe:\n{rendered}")
        return rendered
