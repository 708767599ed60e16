"""
yaib Protocols

Structural interfaces for the sandbox collaborators the lifecycle driver
consumes. Using Protocols keeps the driver independent of the docker
backend, so tests can hand in fakes.
"""

from typing import List, Protocol, runtime_checkable


@runtime_checkable
class MachineProtocol(Protocol):
    """One sandbox session: shared volumes plus a forwarded argument list."""

    def add_volume(self, path: str) -> None:
        """Share a host directory with the sandbox at the same path."""
        ...

    def create_image(self, path: str, size: int) -> str:
        """Create a disk image of `size` bytes and return how the sandbox refers to it."""
        ...

    def run_with_args(self, args: List[str]) -> int:
        """Re-run the program inside the sandbox with `args`; block and return its exit status."""
        ...


@runtime_checkable
class SandboxProtocol(Protocol):
    """Probes and constructor for sandbox sessions."""

    def in_machine(self) -> bool:
        """Whether the current process already runs inside a sandbox."""
        ...

    def supported(self) -> bool:
        """Whether a sandbox can be started from this host."""
        ...

    def new_machine(self) -> MachineProtocol:
        ...
