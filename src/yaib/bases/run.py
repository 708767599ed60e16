import shlex
import logging
from pathlib import Path
from typing import Optional

from pydantic import model_validator

from ..abstractions import Action
from ..datacls import BuildContext
from ..exceptions import ActionDefinitionError
from ..io import copy_file
from ..utils import Command

logger = logging.getLogger(__name__)


class RunAction(Action):
    """
    Run a shell command or a script from the recipe directory.

    On the host the command sees ROOTDIR, ARTIFACTDIR, RECIPEDIR and IMAGE
    in its environment; with `chroot: true` it runs inside the root
    filesystem instead.
    """
    chroot: bool = False
    command: Optional[str] = None
    script: Optional[str] = None

    @model_validator(mode='after')
    def check_command_or_script(self) -> 'RunAction':
        if (self.command is None) == (self.script is None):
            raise ActionDefinitionError("A run action needs exactly one of 'command' or 'script'.")
        return self

    def _script_argv(self, context: BuildContext):
        argv = shlex.split(self.script)
        return context.recipe_dir / argv[0], argv[1:]

    def verify(self, context: BuildContext) -> None:
        if self.script is not None:
            script, _ = self._script_argv(context)
            if not script.is_file():
                raise ActionDefinitionError(f"Script '{script}' does not exist")

    def run(self, context: BuildContext) -> None:
        if self.chroot:
            cmd = Command(chroot=context.rootdir)
        else:
            env = {
                "ROOTDIR": str(context.rootdir),
                "ARTIFACTDIR": str(context.artifactdir),
                "RECIPEDIR": str(context.recipe_dir),
            }
            if context.image:
                env["IMAGE"] = context.image
            cmd = Command(env=env)

        if self.command is not None:
            cmd.run(str(self), "sh", "-c", self.command, cwd=None if self.chroot else context.recipe_dir)
            return

        script, args = self._script_argv(context)
        if self.chroot:
            # the script has to be reachable from inside the root filesystem
            staged = context.rootdir / "tmp" / script.name
            staged.parent.mkdir(parents=True, exist_ok=True)
            copy_file(script, staged, 0o755)
            try:
                cmd.run(str(self), str(Path("/tmp") / script.name), *args)
            finally:
                staged.unlink(missing_ok=True)
        else:
            cmd.run(str(self), str(script), *args, cwd=context.recipe_dir)
