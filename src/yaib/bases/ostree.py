import logging
from typing import Optional

from pydantic import Field

from ..abstractions import Action
from ..datacls import BuildContext
from ..exceptions import BuildError
from ..utils import Command
from .filesystem import write_fstab

logger = logging.getLogger(__name__)


class OstreeCommitAction(Action):
    """Commit the root filesystem to a branch of an OSTree repository in the artifact directory."""
    repository: str
    branch: str
    subject: str = ""

    def run(self, context: BuildContext) -> None:
        repo = context.artifactdir / self.repository
        cmd = Command()
        if not (repo / "config").exists():
            repo.mkdir(parents=True, exist_ok=True)
            cmd.run("ostree", "ostree", "init", f"--repo={repo}", "--mode=archive")

        argv = ["ostree", "commit", f"--repo={repo}", f"--branch={self.branch}", f"--tree=dir={context.rootdir}"]
        if self.subject:
            argv.append(f"--subject={self.subject}")
        cmd.run("ostree", *argv)


class OstreeDeployAction(Action):
    """Deploy an OSTree branch into the mounted image."""
    repository: str
    remote_repository: Optional[str] = None
    branch: str
    os: str = "debian"
    setup_fstab: bool = Field(True, alias="setup-fstab")
    setup_kernel_cmdline: bool = Field(True, alias="setup-kernel-cmdline")
    append_kernel_cmdline: Optional[str] = Field(None, alias="append-kernel-cmdline")

    def run(self, context: BuildContext) -> None:
        if context.image_mntdir is None:
            raise BuildError("ostree-deploy needs a mounted image; add an image-partition action before it")

        sysroot = context.image_mntdir
        sysrepo = sysroot / "ostree" / "repo"
        cmd = Command()

        cmd.run("ostree", "ostree", "admin", "init-fs", str(sysroot))
        cmd.run("ostree", "ostree", "admin", "os-init", f"--sysroot={sysroot}", self.os)
        if self.remote_repository:
            cmd.run("ostree", "ostree", f"--repo={sysrepo}", "remote", "add", "--no-gpg-verify",
                    "origin", self.remote_repository)
        cmd.run("ostree", "ostree", f"--repo={sysrepo}", "pull-local",
                str(context.artifactdir / self.repository), self.branch)

        argv = ["ostree", "admin", "deploy", f"--sysroot={sysroot}", f"--os={self.os}"]
        if self.setup_kernel_cmdline:
            if context.image_kernel_root:
                argv.append(f"--karg={context.image_kernel_root}")
            if self.append_kernel_cmdline:
                argv += [f"--karg-append={karg}" for karg in self.append_kernel_cmdline.split()]
        argv.append(self.branch)
        cmd.run("ostree", *argv)

        if self.setup_fstab:
            deployments = sorted((sysroot / "ostree" / "deploy" / self.os / "deploy").glob("*.0"))
            if not deployments:
                raise BuildError(f"No deployment found for os '{self.os}' in {sysroot}")
            write_fstab(context, deployments[-1])
