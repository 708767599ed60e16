import shutil
import logging
from typing import Literal

from pydantic import Field

from ..abstractions import Action
from ..datacls import BuildContext
from ..exceptions import ActionDefinitionError, BuildError

logger = logging.getLogger(__name__)


class RawAction(Action):
    """
    Write a file verbatim into the image at a byte offset, e.g. a
    bootloader. `offset` usually comes from the `sector` template helper.
    """
    origin: Literal["filesystem", "recipe", "artifacts"] = "filesystem"
    source: str
    offset: int = Field(0, ge=0)

    def _source_path(self, context: BuildContext):
        bases = {
            "filesystem": context.rootdir,
            "recipe": context.recipe_dir,
            "artifacts": context.artifactdir,
        }
        return bases[self.origin] / self.source.lstrip("/")

    def verify(self, context: BuildContext) -> None:
        if self.origin == "recipe" and not self._source_path(context).is_file():
            raise ActionDefinitionError(f"Raw source '{self._source_path(context)}' does not exist")

    def run(self, context: BuildContext) -> None:
        if not context.image:
            raise BuildError("raw action needs an image; add an image-partition action before it")

        source = self._source_path(context)
        logger.info(f"Writing {source} into {context.image} at offset {self.offset}")
        with open(source, "rb") as fin, open(context.image, "r+b") as fout:
            fout.seek(self.offset)
            shutil.copyfileobj(fin, fout)
