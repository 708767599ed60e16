import logging
from typing import Optional

from pydantic import Field

from ..abstractions import Action
from ..datacls import BuildContext
from ..exceptions import BuildError
from ..io import copy_tree

logger = logging.getLogger(__name__)


def write_kernel_cmdline(context: BuildContext, target, append: Optional[str]) -> None:
    parts = [context.image_kernel_root, append or ""]
    cmdline = target / "etc" / "kernel" / "cmdline"
    cmdline.parent.mkdir(parents=True, exist_ok=True)
    cmdline.write_text(" ".join(p for p in parts if p) + "\n")
    logger.debug(f"Wrote {cmdline}")


def write_fstab(context: BuildContext, target) -> None:
    fstab = target / "etc" / "fstab"
    fstab.parent.mkdir(parents=True, exist_ok=True)
    fstab.write_text(context.image_fstab)
    logger.debug(f"Wrote {fstab}")


class FilesystemDeployAction(Action):
    """Deploy the root filesystem onto the mounted image."""
    setup_fstab: bool = Field(True, alias="setup-fstab")
    setup_kernel_cmdline: bool = Field(True, alias="setup-kernel-cmdline")
    append_kernel_cmdline: Optional[str] = Field(None, alias="append-kernel-cmdline")

    def run(self, context: BuildContext) -> None:
        if context.image_mntdir is None:
            raise BuildError("filesystem-deploy needs a mounted image; add an image-partition action before it")

        copy_tree(context.rootdir, context.image_mntdir)
        if self.setup_fstab:
            write_fstab(context, context.image_mntdir)
        if self.setup_kernel_cmdline:
            write_kernel_cmdline(context, context.image_mntdir, self.append_kernel_cmdline)
