"""Helm command abstractions.

This module provides the Helm operations a deployment run needs:
repository registration and refresh, chart fetch and render, and the
``upgrade --install`` release path.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from .builder import Argument, CommandBuilder
from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner

HELM_BIN = "helm"


class HelmCommands:
    """Helm-related shell commands.

    Provides operations for:
    - Repository management (add, update)
    - Chart retrieval and rendering (fetch, template)
    - Release management (upgrade --install)

    Every method raises ExecError when Helm exits nonzero.
    """

    def __init__(self, runner: CommandRunner, program: str = HELM_BIN) -> None:
        """Initialize Helm commands.

        Args:
            runner: Command runner for executing shell commands
            program: Helm executable name or path
        """
        self._runner = runner
        self.program = program

    def _builder(self) -> CommandBuilder:
        return CommandBuilder(self.program)

    # =========================================================================
    # Repository Management
    # =========================================================================

    def repo_add(
        self,
        name: str,
        url: str,
        *,
        username: str | None = None,
        password: str | None = None,
    ) -> CommandResult:
        """Register a chart repository.

        Credentials are marked secret so they never show up in logs.

        Args:
            name: Local repository name
            url: Repository URL
            username: Optional basic-auth username
            password: Optional basic-auth password
        """
        cmd = (
            self._builder()
            .raw("repo", "add", name, url)
            .long("username", username, secret=True)
            .long("password", password, secret=True)
            .build()
        )
        return self._runner.run(cmd)

    def repo_update(self) -> CommandResult:
        """Refresh the local cache of every registered repository."""
        return self._runner.run(self._builder().raw("repo", "update").build())

    # =========================================================================
    # Charts
    # =========================================================================

    def fetch(self, chart: str, version: str, *, cwd: Path | None = None) -> CommandResult:
        """Download and unpack a chart into the working directory.

        Args:
            chart: Chart reference (e.g. "stable/nginx-ingress")
            version: Pinned chart version
            cwd: Directory the chart is unpacked into
        """
        cmd = (
            self._builder()
            .raw("fetch")
            .long("version", version)
            .raw("--untar", chart)
            .build()
        )
        return self._runner.run(cmd, cwd=cwd)

    def template(
        self,
        chart_dir: str,
        *,
        release_name: str = "",
        namespace: str = "",
        overrides: Sequence[Argument] = (),
        cwd: Path | None = None,
    ) -> str:
        """Render a local chart into manifest text.

        Args:
            chart_dir: Directory of the unpacked chart
            release_name: Release name used while rendering
            namespace: Namespace used while rendering
            overrides: Value file and --set arguments, in precedence order
            cwd: Directory containing chart_dir

        Returns:
            Rendered manifests as produced by Helm
        """
        builder = self._builder().raw("template")
        if namespace:
            builder.long("namespace", namespace)
        if release_name:
            builder.long("name", release_name)
        builder.extend(overrides)
        builder.raw(chart_dir)

        result = self._runner.run(builder.build(), capture_output=True, cwd=cwd)
        return result.stdout

    # =========================================================================
    # Release Management
    # =========================================================================

    def upgrade_install(
        self,
        release_name: str,
        chart: str,
        version: str,
        *,
        namespace: str = "",
        debug: bool = False,
        log_level: int = 0,
        overrides: Sequence[Argument] = (),
        dry_run: bool = False,
    ) -> CommandResult:
        """Deploy or upgrade a Helm release.

        Uses `helm upgrade --install` to idempotently deploy a chart.
        If the release doesn't exist, it will be installed. If it exists,
        it will be upgraded. Output is streamed to the terminal.

        Args:
            release_name: Name for the Helm release
            chart: Chart reference
            version: Pinned chart version
            namespace: Kubernetes namespace, omitted when empty
            debug: Pass --debug to Helm
            log_level: Helm verbosity (--v), omitted when 0
            overrides: Value file and --set arguments, in precedence order
            dry_run: Simulate the install without touching the cluster

        Example:
            >>> helm.upgrade_install(
            ...     "ingress",
            ...     "stable/nginx-ingress",
            ...     "1.6.0",
            ...     namespace="kube-system",
            ... )
        """
        builder = (
            self._builder()
            .raw("upgrade", "--install", release_name, chart)
            .long("version", version)
        )
        if debug:
            builder.raw("--debug")
        if namespace:
            builder.long("namespace", namespace)
        if log_level:
            builder.long("v", str(log_level))
        builder.extend(overrides)
        if dry_run:
            builder.raw("--dry-run")

        return self._runner.run(builder.build())
