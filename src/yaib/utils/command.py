import os
import subprocess
import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..exceptions import CommandError

logger = logging.getLogger(__name__)


class Command:
    """
    Runs external tools for an action, optionally inside a chroot.

    Output is streamed through the logger line by line, prefixed with the
    label so interleaved tool output can be attributed to its action.
    """

    def __init__(self, chroot: Optional[Path] = None, env: Optional[Dict[str, str]] = None):
        self.chroot = chroot
        self.env = dict(env or {})

    def _argv(self, argv: List[str]) -> List[str]:
        if self.chroot is None:
            return [str(a) for a in argv]
        return ["chroot", str(self.chroot)] + [str(a) for a in argv]

    def _environ(self) -> Dict[str, str]:
        environ = dict(os.environ)
        environ.update(self.env)
        return environ

    def run(self, label: str, *argv, cwd: Optional[Path] = None) -> None:
        """Run a command, streaming its output. Raises CommandError on failure."""
        cmd = self._argv(list(argv))
        logger.debug(f"[{label}] Running: {' '.join(cmd)}")
        try:
            process = subprocess.Popen(
                cmd,
                cwd=cwd,
                env=self._environ(),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            raise CommandError(f"{label}: failed to start '{cmd[0]}': {e}") from e

        with process:
            for line in process.stdout:
                logger.info(f"{label} | {line.rstrip()}")
        if process.returncode != 0:
            raise CommandError(f"{label}: '{' '.join(cmd)}' exited with status {process.returncode}")

    def output(self, label: str, *argv) -> str:
        """Run a command and return its stripped stdout. Raises CommandError on failure."""
        cmd = self._argv(list(argv))
        logger.debug(f"[{label}] Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                env=self._environ(),
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise CommandError(f"{label}: '{' '.join(cmd)}' exited with status {e.returncode}: {e.stderr.strip()}") from e
        except OSError as e:
            raise CommandError(f"{label}: failed to start '{cmd[0]}': {e}") from e
        return result.stdout.strip()
