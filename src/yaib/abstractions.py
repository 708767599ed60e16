"""
yaib Abstractions

This module contains the Action base class every recipe step derives from.

An action is a pydantic model: its fields are the keys of its recipe entry,
and its methods are the six lifecycle phases. Every phase is a no-op by
default so concrete kinds only override what they need.

Phase order, across the whole recipe:
    verify -> (pre_machine | pre_no_machine) -> run -> cleanup -> post_machine
"""

from typing import List, Optional, TYPE_CHECKING
import logging

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .datacls.contexts import BuildContext
    from .protocols import MachineProtocol

logger = logging.getLogger(__name__)


class ActionHeader(BaseModel):
    """The fields shared by every recipe entry, used to probe the tag."""
    model_config = ConfigDict(extra="allow")

    action: str
    description: Optional[str] = None


class Action(BaseModel):
    """
    Base class for a recipe step
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    action: str = Field(frozen=True)
    description: Optional[str] = None

    def verify(self, context: "BuildContext") -> None:
        """
        Validate configuration and preconditions. Runs before the execution
        mode is decided, on both sides of the sandbox boundary.
        """
        pass

    def pre_machine(self, context: "BuildContext", machine: "MachineProtocol", args: List[str]) -> None:
        """
        Register volumes and forwarded arguments the sandboxed run will need.
        Only called on the host when a sandbox is about to be used.
        """
        pass

    def pre_no_machine(self, context: "BuildContext") -> None:
        """
        Do on the host what the sandbox would otherwise have set up.
        Only called when no sandbox is used.
        """
        pass

    def run(self, context: "BuildContext") -> None:
        """Perform the action's effect."""
        pass

    def cleanup(self, context: "BuildContext") -> None:
        """Release resources acquired during run. Receives a snapshot."""
        pass

    def post_machine(self, context: "BuildContext") -> None:
        """Finalize host-visible artifacts. Receives a snapshot."""
        pass

    def __str__(self) -> str:
        return self.description or self.action
