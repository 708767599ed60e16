"""
yaib Build Context

This module contains the BuildContext data class, which holds the state
threaded through every lifecycle phase of a pipeline run.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .. import constants


class BuildContext(BaseModel):
    """
    Holds the shared, mutable state for one process invocation.

    A single instance is created per process and handed by reference to the
    phases that may change it. Cleanup and PostMachine receive a snapshot.
    """
    model_config = ConfigDict(validate_assignment=True)

    scratchdir: Path
    artifactdir: Path
    recipe_dir: Path
    image: Optional[str] = None
    image_mntdir: Optional[Path] = None
    # fstab lines accumulated while partitioning
    image_fstab: str = ""
    # kernel cmdline root= snippet for the / of the image
    image_kernel_root: str = ""
    architecture: str = ""

    @field_validator("artifactdir")
    @classmethod
    def check_artifactdir_absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"artifactdir must be absolute, got '{value}'")
        return value

    @property
    def rootdir(self) -> Path:
        return self.scratchdir / constants.ROOTDIR_NAME

    def add_fstab_entry(self, source: str, mountpoint: str, fstype: str, options: str = "defaults") -> None:
        self.image_fstab += f"{source}\t{mountpoint}\t{fstype}\t{options}\t0\t0\n"

    def snapshot(self) -> "BuildContext":
        """A detached copy for phases that only read the context."""
        return self.model_copy(deep=True)
