import logging
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from ..abstractions import Action
from ..datacls import BuildContext
from ..exceptions import ActionDefinitionError
from ..protocols import MachineProtocol
from ..utils import Command, parse_size
from .. import constants

logger = logging.getLogger(__name__)

# filesystem -> (mkfs command, label flag, parted fs-type)
FILESYSTEMS = {
    "ext2": ("mkfs.ext2", "-L", "ext2"),
    "ext3": ("mkfs.ext3", "-L", "ext3"),
    "ext4": ("mkfs.ext4", "-L", "ext4"),
    "btrfs": ("mkfs.btrfs", "-L", "btrfs"),
    "xfs": ("mkfs.xfs", "-L", "xfs"),
    "vfat": ("mkfs.vfat", "-n", "fat32"),
    "swap": ("mkswap", "-L", "linux-swap"),
}


class Partition(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    fs: str
    start: Union[int, str]
    end: Union[int, str]
    flags: List[str] = Field(default_factory=list)


class Mountpoint(BaseModel):
    model_config = ConfigDict(extra="forbid")

    mountpoint: str
    partition: str
    options: List[str] = Field(default_factory=list)


def partition_device(image: str, number: int) -> str:
    # /dev/loop0 -> /dev/loop0p1, /dev/vda -> /dev/vda1
    if image[-1].isdigit():
        return f"{image}p{number}"
    return f"{image}{number}"


class ImagePartitionAction(Action):
    """
    Create a disk image, partition it, make filesystems and mount them under
    `scratchdir/mnt`. Records fstab entries and the kernel root= fragment in
    the build context for later actions.
    """
    imagename: str
    imagesize: Union[int, str]
    partitiontype: Literal["gpt", "msdos"] = "gpt"
    partitions: List[Partition]
    mountpoints: List[Mountpoint] = Field(default_factory=list)

    _host_loop: Optional[str] = PrivateAttr(None)
    _run_loop: Optional[str] = PrivateAttr(None)
    _mounted: List[Path] = PrivateAttr(default_factory=list)

    def verify(self, context: BuildContext) -> None:
        if parse_size(self.imagesize) <= 0:
            raise ActionDefinitionError(f"Image size must be positive, got '{self.imagesize}'")
        names = [p.name for p in self.partitions]
        if len(names) != len(set(names)):
            raise ActionDefinitionError(f"Duplicate partition names in {names}")
        for p in self.partitions:
            if p.fs not in FILESYSTEMS:
                raise ActionDefinitionError(f"Partition '{p.name}' has unsupported fs '{p.fs}', expected one of {sorted(FILESYSTEMS)}")
        for m in self.mountpoints:
            if m.partition not in names:
                raise ActionDefinitionError(f"Mountpoint '{m.mountpoint}' refers to unknown partition '{m.partition}'")

    def _image_path(self, context: BuildContext) -> Path:
        return context.artifactdir / self.imagename

    def _attach(self, image: str) -> str:
        device = Command().output("losetup", "losetup", "--find", "--show", "--partscan", image)
        logger.info(f"Attached {image} to {device}")
        return device

    def _detach(self, device: str) -> None:
        Command().run("losetup", "losetup", "--detach", device)
        logger.info(f"Detached {device}")

    def pre_machine(self, context: BuildContext, machine: MachineProtocol, args: List[str]) -> None:
        image = machine.create_image(str(self._image_path(context)), parse_size(self.imagesize))
        args += ["--internal-image", image]

    def pre_no_machine(self, context: BuildContext) -> None:
        image = self._image_path(context)
        image.parent.mkdir(parents=True, exist_ok=True)
        with open(image, "wb") as f:
            f.truncate(parse_size(self.imagesize))
        self._host_loop = self._attach(str(image))
        context.image = self._host_loop

    def run(self, context: BuildContext) -> None:
        if not context.image:
            raise ActionDefinitionError("No image to partition")
        if Path(context.image).is_file():
            self._run_loop = self._attach(context.image)
            context.image = self._run_loop

        cmd = Command()
        image = context.image
        cmd.run("parted", "parted", "-s", image, "mklabel", self.partitiontype)
        for number, p in enumerate(self.partitions, start=1):
            mkfs, label_flag, parted_fs = FILESYSTEMS[p.fs]
            name = p.name if self.partitiontype == "gpt" else "primary"
            cmd.run("parted", "parted", "-a", "none", "-s", "--", image,
                    "mkpart", name, parted_fs, str(p.start), str(p.end))
            for flag in p.flags:
                cmd.run("parted", "parted", "-s", image, "set", str(number), flag, "on")
            cmd.run("mkfs", mkfs, label_flag, p.name, partition_device(image, number))

        self._mount_all(context)

    def _mount_all(self, context: BuildContext) -> None:
        cmd = Command()
        numbers = {p.name: number for number, p in enumerate(self.partitions, start=1)}
        fstypes = {p.name: p.fs for p in self.partitions}
        context.image_mntdir = context.scratchdir / constants.MNTDIR_NAME

        # parents before children
        for m in sorted(self.mountpoints, key=lambda m: len(m.mountpoint.rstrip("/"))):
            device = partition_device(context.image, numbers[m.partition])
            target = context.image_mntdir / m.mountpoint.lstrip("/")
            target.mkdir(parents=True, exist_ok=True)
            cmd.run("mount", "mount", device, str(target))
            self._mounted.append(target)

            uuid = cmd.output("blkid", "blkid", "-o", "value", "-s", "UUID", device)
            options = ",".join(m.options) or "defaults"
            context.add_fstab_entry(f"UUID={uuid}", m.mountpoint, fstypes[m.partition], options)
            if m.mountpoint == "/":
                context.image_kernel_root = f"root=UUID={uuid}"

    def cleanup(self, context: BuildContext) -> None:
        cmd = Command()
        while self._mounted:
            cmd.run("umount", "umount", str(self._mounted.pop()))
        if self._run_loop:
            self._detach(self._run_loop)
            self._run_loop = None

    def post_machine(self, context: BuildContext) -> None:
        if self._host_loop:
            self._detach(self._host_loop)
            self._host_loop = None
