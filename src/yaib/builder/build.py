import logging
from typing import Callable, Dict, List, Optional

from ..abstractions import Action
from ..constants import ExecutionMode, Phase
from ..datacls import BuildContext
from ..exceptions import ActionError, ActionVerifyError
from ..protocols import SandboxProtocol
from ..recipe import Recipe

logger = logging.getLogger(__name__)


class Builder:
    """
    Drives a recipe through the action lifecycle.

    Every phase runs over all actions in recipe order before the next phase
    starts. The first failure stops the pipeline: nothing already done is
    rolled back, and no later phase is called for any action.
    """

    def __init__(
        self,
        recipe: Recipe,
        context: BuildContext,
        sandbox: SandboxProtocol,
        recipe_file: Optional[str] = None,
        template_vars: Optional[Dict[str, str]] = None,
        forward_args: Optional[List[str]] = None,
    ):
        self.recipe = recipe
        self.context = context
        self.sandbox = sandbox
        self.recipe_file = recipe_file
        self.template_vars = dict(template_vars or {})
        self.forward_args = list(forward_args or [])
        self.mode: Optional[ExecutionMode] = None

    def run(self) -> int:
        """Orchestrates the whole lifecycle. Returns the process exit status."""
        logger.info(f"[Builder] Starting build of {len(self.recipe)} actions for {self.recipe.architecture}...")
        self._each(Phase.VERIFY, lambda a: a.verify(self.context))

        self.mode = self._decide_mode()
        logger.info(f"[Builder] Execution mode: {self.mode.value}")

        if self.mode is ExecutionMode.HOST_WITH_SANDBOX:
            return self._run_in_machine()

        if self.mode is ExecutionMode.HOST_DIRECT:
            self._each(Phase.PRE_NO_MACHINE, lambda a: a.pre_no_machine(self.context))

        self._each(Phase.RUN, lambda a: a.run(self.context))
        self._each(Phase.CLEANUP, lambda a: a.cleanup(self.context.snapshot()))

        # Inside the sandbox the outer process finalizes once we have exited
        if self.mode is ExecutionMode.HOST_DIRECT:
            self._each(Phase.POST_MACHINE, lambda a: a.post_machine(self.context.snapshot()))

        logger.info("[Builder] Build finished.")
        return 0

    def _decide_mode(self) -> ExecutionMode:
        if self.sandbox.in_machine():
            return ExecutionMode.INSIDE_SANDBOX
        if not self.sandbox.supported():
            return ExecutionMode.HOST_DIRECT
        return ExecutionMode.HOST_WITH_SANDBOX

    def machine_args(self) -> List[str]:
        """The arguments the inner run needs to rebuild the same recipe and context."""
        args = list(self.forward_args)
        args += ["--artifactdir", str(self.context.artifactdir)]
        for name, value in self.template_vars.items():
            args += ["--template-var", f'{name}:"{value}"']
        args.append(str(self.recipe_file))
        return args

    def _run_in_machine(self) -> int:
        machine = self.sandbox.new_machine()
        machine.add_volume(str(self.context.artifactdir))
        machine.add_volume(str(self.context.recipe_dir))
        args = self.machine_args()

        self._each(Phase.PRE_MACHINE, lambda a: a.pre_machine(self.context, machine, args))

        logger.debug(f"[Builder] Forwarding to sandbox: {args}")
        ret = machine.run_with_args(args)
        if ret != 0:
            logger.error(f"[Builder] Sandboxed build exited with status {ret}")
            return ret

        self._each(Phase.POST_MACHINE, lambda a: a.post_machine(self.context.snapshot()))
        logger.info("[Builder] Build finished.")
        return 0

    def _each(self, phase: Phase, call: Callable[[Action], None]) -> None:
        """Run one phase over every action, stopping at the first failure."""
        logger.debug(f"[Builder] Phase {phase}")
        for action in self.recipe:
            if phase is Phase.RUN:
                logger.info(f"[Builder] Running action `{action}`")
            try:
                call(action)
            except Exception as e:
                if phase is Phase.VERIFY:
                    raise ActionVerifyError(action, phase, e) from e
                raise ActionError(action, phase, e) from e
