import os
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def clean_path_at(path: str | os.PathLike, at: str | os.PathLike) -> Path:
    """
    Resolve a path against a base directory and normalize it lexically.

    Absolute paths only get normalized; relative ones are joined onto `at`
    first. Symlinks are not resolved.
    """
    path = os.fspath(path)
    if not os.path.isabs(path):
        path = os.path.join(os.fspath(at), path)
    return Path(os.path.normpath(path))


def clean_path(path: str | os.PathLike, cwd: Optional[str | os.PathLike] = None) -> Path:
    """
    Resolve a path against the current (or given) working directory.
    """
    if cwd is None:
        cwd = os.getcwd()
    cleaned = clean_path_at(path, cwd)
    logger.debug(f"Cleaned path '{path}' -> '{cleaned}'")
    return cleaned
