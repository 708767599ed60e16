import logging
from typing import List, Optional

from pydantic import Field

from ..abstractions import Action
from ..datacls import BuildContext
from ..exceptions import ActionDefinitionError
from ..utils import Command

logger = logging.getLogger(__name__)


class DebootstrapAction(Action):
    """Bootstrap a Debian-based root filesystem into the scratch root."""
    suite: str
    mirror: str = "http://deb.debian.org/debian"
    components: List[str] = Field(default_factory=lambda: ["main"])
    variant: Optional[str] = None
    keyring_package: Optional[str] = Field(None, alias="keyring-package")
    check_gpg: bool = Field(True, alias="check-gpg")
    merged_usr: bool = Field(True, alias="merged-usr")

    def verify(self, context: BuildContext) -> None:
        if not self.components:
            raise ActionDefinitionError("debootstrap needs at least one component")

    def run(self, context: BuildContext) -> None:
        context.rootdir.mkdir(parents=True, exist_ok=True)
        argv = [
            "debootstrap",
            f"--arch={context.architecture}",
            f"--components={','.join(self.components)}",
            "--merged-usr" if self.merged_usr else "--no-merged-usr",
        ]
        if self.variant:
            argv.append(f"--variant={self.variant}")
        if self.keyring_package:
            argv.append(f"--include={self.keyring_package}")
        if not self.check_gpg:
            argv.append("--no-check-gpg")
        argv += [self.suite, str(context.rootdir), self.mirror]

        Command().run("debootstrap", *argv)

        sources = context.rootdir / "etc" / "apt" / "sources.list"
        sources.parent.mkdir(parents=True, exist_ok=True)
        sources.write_text(f"deb {self.mirror} {self.suite} {' '.join(self.components)}\n")
        logger.debug(f"Wrote {sources}")
