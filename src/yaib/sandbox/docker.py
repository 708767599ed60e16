"""
Docker-backed sandbox

The inner run is the same `yaib` program started in a privileged, throwaway
container. Host directories are bind-mounted at identical paths so every
path in the forwarded arguments stays valid on both sides.
"""

import os
import shutil
import logging
from functools import cached_property
from pathlib import Path
from typing import Dict, List, Optional

from python_on_whales import DockerClient, DockerException

from .. import constants
from ..exceptions import SandboxError

logger = logging.getLogger(__name__)


class DockerMachine:
    """One sandbox session. Collects volumes, then runs once."""

    def __init__(self, client: DockerClient, image: str, environment: Optional[Dict[str, str]] = None):
        self.client = client
        self.image = image
        self.volumes: List[str] = ["/dev"]
        self.environment = {constants.IN_SANDBOX_ENV: "1"}
        self.environment.update(environment or {})

    def add_volume(self, path: str) -> None:
        path = str(path)
        if path not in self.volumes:
            logger.debug(f"Sharing volume '{path}' with the sandbox")
            self.volumes.append(path)

    def create_image(self, path: str, size: int) -> str:
        image = Path(path)
        try:
            image.parent.mkdir(parents=True, exist_ok=True)
            with open(image, "wb") as f:
                f.truncate(size)
        except OSError as e:
            raise SandboxError(f"Failed to create image '{image}': {e}") from e
        logger.info(f"Created {size} byte image '{image}'")
        self.add_volume(str(image.parent))
        return str(image)

    def run_with_args(self, args: List[str]) -> int:
        command = constants.SANDBOX_ENTRYPOINT + list(args)
        logger.info(f"Starting sandbox from image '{self.image}': {' '.join(command)}")
        logger.debug(f"Sandbox volumes: {self.volumes}")
        try:
            output = self.client.run(
                self.image,
                command,
                envs=self.environment,
                privileged=True,
                remove=True,
                volumes=[(volume, volume) for volume in self.volumes],
                stream=True,
            )
            for _source, chunk in output:
                for line in chunk.decode("utf-8", errors="replace").splitlines():
                    logger.info(f"sandbox | {line}")
        except DockerException as e:
            logger.error(f"Sandbox exited with status {e.return_code}")
            return e.return_code
        logger.info("Sandbox finished successfully")
        return 0


class DockerSandbox:
    """
    Probes and constructor for docker sandbox sessions.

    Args:
        enabled: False forces host-direct execution.
        image: container image with yaib installed; defaults to $YAIB_SANDBOX_IMAGE.
        client: python-on-whales client, mainly for tests.
    """

    def __init__(self, enabled: bool = True, image: Optional[str] = None, client: Optional[DockerClient] = None):
        self.enabled = enabled and not os.environ.get(constants.DISABLE_SANDBOX_ENV)
        self.image = image or os.environ.get(constants.SANDBOX_IMAGE_ENV, constants.DEFAULT_SANDBOX_IMAGE)
        self._client = client

    @property
    def client(self) -> DockerClient:
        if self._client is None:
            self._client = DockerClient()
        return self._client

    def in_machine(self) -> bool:
        return os.environ.get(constants.IN_SANDBOX_ENV) == "1"

    @cached_property
    def _available(self) -> bool:
        if self._client is None and shutil.which("docker") is None:
            logger.debug("docker CLI not found, sandbox unavailable")
            return False
        try:
            self.client.system.info()
        except DockerException as e:
            logger.warning(f"Docker daemon not reachable, running without sandbox: {e}")
            return False
        return True

    def supported(self) -> bool:
        if not self.enabled:
            return False
        return self._available

    def new_machine(self) -> DockerMachine:
        return DockerMachine(self.client, self.image)
