import logging
from typing import List

from ..abstractions import Action
from ..datacls import BuildContext
from ..exceptions import ActionDefinitionError
from ..utils import Command

logger = logging.getLogger(__name__)


class AptAction(Action):
    """Install packages into the root filesystem with apt-get."""
    packages: List[str]
    recommends: bool = False

    def verify(self, context: BuildContext) -> None:
        if not self.packages:
            raise ActionDefinitionError("apt action needs at least one package")

    def run(self, context: BuildContext) -> None:
        cmd = Command(chroot=context.rootdir, env={"DEBIAN_FRONTEND": "noninteractive"})
        install = ["apt-get", "-y", "install"]
        if not self.recommends:
            install.append("--no-install-recommends")

        cmd.run("apt", "apt-get", "update")
        cmd.run("apt", *install, *self.packages)
        cmd.run("apt", "apt-get", "clean")
