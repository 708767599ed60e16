"""
File tree materializer

Copies single files atomically and overlays whole trees onto one another,
keeping permission bits and recreating symbolic links verbatim.
"""

import os
import stat
import shutil
import tempfile
import logging
from pathlib import Path

from ..exceptions import TreeCopyError

logger = logging.getLogger(__name__)


def copy_file(src: str | os.PathLike, dst: str | os.PathLike, mode: int) -> None:
    """
    Copy `src` to `dst` through a temporary file in the destination directory.

    The temporary file gets `mode` and is renamed over `dst` only once it is
    fully written, so `dst` is never observable half-written.
    """
    dst = Path(dst)
    with open(src, 'rb') as fin:
        fd, tmp_name = tempfile.mkstemp(dir=dst.parent, prefix=f".{dst.name}.")
        try:
            with os.fdopen(fd, 'wb') as fout:
                shutil.copyfileobj(fin, fout)
            os.chmod(tmp_name, stat.S_IMODE(mode))
            os.replace(tmp_name, dst)
        except BaseException:
            os.unlink(tmp_name)
            raise


def _make_dir(target: Path, mode: int) -> None:
    try:
        os.mkdir(target)
    except FileExistsError:
        if not target.is_dir():
            raise
        return
    os.chmod(target, stat.S_IMODE(mode))


def _copy_entry(path: Path, target: Path, relative: Path) -> None:
    st = os.lstat(path)
    if stat.S_ISREG(st.st_mode):
        logger.debug(f"F> {path}")
        copy_file(path, target, st.st_mode)
    elif stat.S_ISDIR(st.st_mode):
        logger.debug(f"D> {path} -> {target}")
        _make_dir(target, st.st_mode)
        for child in sorted(os.listdir(path)):
            _copy_entry(path / child, target / child, relative / child)
    elif stat.S_ISLNK(st.st_mode):
        link = os.readlink(path)
        logger.debug(f"L> {path} -> {link}")
        if os.path.isdir(target) and not os.path.islink(target):
            raise TreeCopyError(f"Cannot replace directory /{relative} with a link to {link}")
        if os.path.lexists(target):
            os.unlink(target)
        os.symlink(link, target)
    else:
        raise TreeCopyError(f"Not handled /{relative} {stat.filemode(st.st_mode)}")


def copy_tree(source: str | os.PathLike, destination: str | os.PathLike) -> None:
    """
    Overlay the tree at `source` onto `destination`.

    Directories are visited top-down so parents always exist before their
    children are written. Existing destination directories are kept.
    """
    source, destination = Path(source), Path(destination)
    logger.info(f"Overlaying {source} on {destination}")
    _copy_entry(source, destination, Path("."))
