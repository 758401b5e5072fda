"""Kubectl command abstractions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .builder import CommandBuilder, Invocation
from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner

KUBECTL_BIN = "kubectl"


class KubectlCommands:
    """Kubectl-related shell commands.

    Provides operations for:
    - Cluster context selection
    - Applying manifest streams
    """

    def __init__(self, runner: CommandRunner, program: str = KUBECTL_BIN) -> None:
        self._runner = runner
        self.program = program

    def use_context(self, context: str) -> CommandResult:
        """Switch the current kube-config context."""
        cmd = CommandBuilder(self.program).raw("config", "use-context", context).build()
        return self._runner.run(cmd, capture_output=True)

    def apply_command(self) -> Invocation:
        """Build ``kubectl apply --filename -``, which reads manifests from stdin."""
        return CommandBuilder(self.program).raw("apply").long("filename", "-").build()

    def apply(self, manifests: str) -> CommandResult:
        """Apply manifest text read from standard input.

        Args:
            manifests: Rendered manifests; never inspected here

        Raises:
            ExecError: If kubectl exits nonzero
        """
        return self._runner.run(self.apply_command(), input=manifests)
