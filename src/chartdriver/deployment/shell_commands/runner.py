"""Command runner for executing shell commands.

This module provides the base command execution functionality used by
the Helm and kubectl command modules.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from loguru import logger

from chartdriver.errors import ExecError

from .builder import Invocation
from .types import CommandResult

# Exit status reported when the program could not be started at all,
# matching what a shell reports for a missing command.
SPAWN_FAILURE_EXIT_CODE = 127


class CommandRunner:
    """Low-level command executor with consistent result handling.

    Each call to ``run`` spawns exactly one process and blocks until it
    exits. There is no retry and no timeout here; callers own that policy.
    """

    def __init__(self, work_dir: Path | None = None) -> None:
        """Initialize the command runner.

        Args:
            work_dir: Directory commands run in. Defaults to the current
                      working directory of the process.
        """
        self.work_dir = work_dir

    def run(
        self,
        invocation: Invocation,
        *,
        capture_output: bool = False,
        input: str | None = None,
        cwd: Path | None = None,
    ) -> CommandResult:
        """Execute an invocation and return structured result.

        Args:
            invocation: Command to run
            capture_output: Capture stdout/stderr instead of streaming them
                            to this process's standard streams
            input: Text written to the child's standard input
            cwd: Working directory (defaults to work_dir)

        Returns:
            CommandResult for a zero exit status

        Raises:
            ExecError: If the process exits nonzero or cannot be started
        """
        rendered = invocation.render()
        logger.debug(f"Running: {rendered}")

        try:
            result = subprocess.run(
                invocation.argv,
                cwd=cwd or self.work_dir,
                capture_output=capture_output,
                input=input,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise ExecError(SPAWN_FAILURE_EXIT_CODE, str(exc), command=rendered) from exc

        if result.returncode != 0:
            raise ExecError(result.returncode, result.stderr or "", command=rendered)

        return CommandResult(
            success=True,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )
