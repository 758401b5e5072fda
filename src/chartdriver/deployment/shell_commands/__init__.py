"""Shell command abstractions for Helm and kubectl.

This package provides the interface for every external process a
deployment run starts. It is organized into specialized modules:

- builder: typed arguments, immutable invocations, redacted rendering
- runner: blocking subprocess execution
- helm: Helm repository, chart and release commands
- kubectl: kube-config context and manifest apply commands

Usage:
    from chartdriver.deployment.shell_commands import ShellCommands

    commands = ShellCommands()
    commands.helm.repo_update()
"""

from pathlib import Path

from .builder import SECRET_MASK, ArgKind, Argument, CommandBuilder, Invocation, render
from .helm import HelmCommands
from .kubectl import KubectlCommands
from .runner import CommandRunner
from .types import CommandResult


class ShellCommands:
    """Unified interface for all shell command operations.

    Attributes:
        helm: Helm-related commands
        kubectl: Kubernetes kubectl commands
    """

    def __init__(self, work_dir: Path | None = None) -> None:
        """Initialize the shell commands executor.

        Args:
            work_dir: Directory commands run in (charts are unpacked here).
                      Defaults to the current working directory.
        """
        self._runner = CommandRunner(work_dir)
        self.helm = HelmCommands(self._runner)
        self.kubectl = KubectlCommands(self._runner)

    @property
    def runner(self) -> CommandRunner:
        return self._runner


__all__ = [
    "ShellCommands",
    "CommandResult",
    "CommandRunner",
    "HelmCommands",
    "KubectlCommands",
    "ArgKind",
    "Argument",
    "CommandBuilder",
    "Invocation",
    "SECRET_MASK",
    "render",
]
