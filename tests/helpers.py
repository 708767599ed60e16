from typing import List, Optional

from pydantic import PrivateAttr

from yaib.abstractions import Action


class RecordingAction(Action):
    """An action that records every phase call and can fail on demand."""
    fail_at: Optional[str] = None
    forward: List[str] = []

    _events: list = PrivateAttr(default_factory=list)

    def _record(self, phase: str):
        self._events.append((phase, str(self)))
        if self.fail_at == phase:
            raise RuntimeError(f"boom in {phase}")

    def verify(self, context):
        self._record("Verify")

    def pre_machine(self, context, machine, args):
        self._record("PreMachine")
        args.extend(self.forward)

    def pre_no_machine(self, context):
        self._record("PreNoMachine")

    def run(self, context):
        self._record("Run")

    def cleanup(self, context):
        self._record("Cleanup")

    def post_machine(self, context):
        self._record("PostMachine")


class FakeMachine:
    def __init__(self, status: int = 0):
        self.status = status
        self.volumes: List[str] = []
        self.images = []
        self.args: Optional[List[str]] = None

    def add_volume(self, path):
        self.volumes.append(str(path))

    def create_image(self, path, size):
        self.images.append((str(path), size))
        return str(path)

    def run_with_args(self, args):
        self.args = list(args)
        return self.status


class FakeSandbox:
    def __init__(self, inside: bool = False, supported: bool = False, status: int = 0):
        self.inside = inside
        self._supported = supported
        self.machine = FakeMachine(status)
        self.probes: List[str] = []

    def in_machine(self):
        self.probes.append("in_machine")
        return self.inside

    def supported(self):
        self.probes.append("supported")
        return self._supported

    def new_machine(self):
        return self.machine


