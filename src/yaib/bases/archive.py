import logging
from typing import Literal, Optional

from ..abstractions import Action
from ..datacls import BuildContext
from ..exceptions import ActionDefinitionError
from ..utils import Command
from .. import constants

logger = logging.getLogger(__name__)

Compression = Literal["gz", "bz2", "xz", "none"]


class PackAction(Action):
    """Archive the root filesystem into a tarball in the artifact directory."""
    file: str
    compression: Compression = "gz"

    def run(self, context: BuildContext) -> None:
        outfile = context.artifactdir / self.file
        outfile.parent.mkdir(parents=True, exist_ok=True)
        flags = f"c{constants.TAR_COMPRESSION_FLAGS[self.compression]}f"
        logger.info(f"Packing {context.rootdir} into {outfile}")
        Command().run("pack", "tar", flags, str(outfile), "-C", str(context.rootdir), ".")


class UnpackAction(Action):
    """Extract a tarball from the artifact directory into the root filesystem."""
    file: str
    # tar detects the compression on extraction when left unset
    compression: Optional[Compression] = None

    def run(self, context: BuildContext) -> None:
        infile = context.artifactdir / self.file
        # may be produced by an earlier pack action, so not checked in verify
        if not infile.is_file():
            raise ActionDefinitionError(f"Archive '{infile}' does not exist")
        context.rootdir.mkdir(parents=True, exist_ok=True)
        flag = constants.TAR_COMPRESSION_FLAGS[self.compression] if self.compression else ""
        logger.info(f"Unpacking {infile} into {context.rootdir}")
        Command().run("unpack", "tar", f"x{flag}f", str(infile), "-C", str(context.rootdir))
