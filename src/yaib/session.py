"""
yaib Build Session

Resolves the paths of one invocation, owns the scratch directory and wires
the recipe, the build context and the lifecycle driver together.
"""

import os
import shutil
import tempfile
import logging
from pathlib import Path
from typing import Dict, List, Optional

from . import constants
from .builder import Builder
from .datacls import BuildContext
from .io import clean_path
from .protocols import SandboxProtocol
from .recipe import Recipe

logger = logging.getLogger(__name__)


class BuildSession:
    """
    One process invocation. Use as a context manager:

        with BuildSession("recipe.yaml", sandbox=DockerSandbox()) as session:
            status = session.run()

    A temporary scratch directory is created under the working directory
    only for host-direct runs and removed on exit. Sandboxed runs use the
    fixed sandbox-internal scratch path, which is never removed here.
    """

    def __init__(
        self,
        recipe_file: str,
        sandbox: SandboxProtocol,
        artifactdir: Optional[str] = None,
        template_vars: Optional[Dict[str, str]] = None,
        internal_image: Optional[str] = None,
        forward_args: Optional[List[str]] = None,
        cwd: Optional[str] = None,
    ):
        self.cwd = Path(cwd) if cwd else Path(os.getcwd())
        self.sandbox = sandbox
        self.template_vars = dict(template_vars or {})
        self.internal_image = internal_image or None
        self.forward_args = list(forward_args or [])

        self.recipe_file = clean_path(recipe_file, self.cwd)
        self.recipe_dir = self.recipe_file.parent
        self.artifactdir = clean_path(artifactdir or self.cwd, self.cwd)

        self.scratchdir: Optional[Path] = None
        self._temporary_scratch = False
        self.context: Optional[BuildContext] = None

    def __enter__(self) -> "BuildSession":
        self.artifactdir.mkdir(parents=True, exist_ok=True)
        self.scratchdir = self._prepare_scratchdir()
        self.context = BuildContext(
            scratchdir=self.scratchdir,
            artifactdir=self.artifactdir,
            recipe_dir=self.recipe_dir,
            image=self.internal_image,
        )
        logger.debug(f"Session context: {self.context!r}")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._temporary_scratch and self.scratchdir is not None:
            logger.debug(f"Removing scratch directory '{self.scratchdir}'")
            shutil.rmtree(self.scratchdir, ignore_errors=True)

    def _prepare_scratchdir(self) -> Path:
        # The outer process of a sandboxed run never touches the scratch dir
        if self.sandbox.in_machine() or self.sandbox.supported():
            scratchdir = Path(constants.SANDBOX_SCRATCHDIR)
            if self.sandbox.in_machine():
                scratchdir.mkdir(parents=True, exist_ok=True)
            return scratchdir

        scratchdir = Path(tempfile.mkdtemp(prefix=constants.SCRATCH_PREFIX, dir=self.cwd))
        self._temporary_scratch = True
        logger.debug(f"Created scratch directory '{scratchdir}'")
        return scratchdir

    def run(self) -> int:
        if self.context is None:
            raise RuntimeError("BuildSession.run() called outside of its context manager")

        recipe = Recipe.load(self.recipe_file, self.template_vars)
        self.context.architecture = recipe.architecture

        builder = Builder(
            recipe,
            self.context,
            self.sandbox,
            recipe_file=str(self.recipe_file),
            template_vars=self.template_vars,
            forward_args=self.forward_args,
        )
        return builder.run()
