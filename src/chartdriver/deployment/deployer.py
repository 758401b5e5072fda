"""Cluster deployer.

This module provides the ClusterDeployer class which runs one deployment
against a cluster. It coordinates specialized components for:
- Kube-config setup (optional config payload and context)
- Chart repository synchronization
- Release installation

Each phase runs to completion before the next starts, and every external
process is started and awaited one at a time.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from chartdriver.config.models import ClusterConfig
from chartdriver.errors import ConfigError, ExecError

from .constants import DeploymentConstants, DeploymentPaths
from .installer import ReleaseInstaller
from .overrides import OverrideResolver
from .repositories import RepositorySynchronizer
from .shell_commands import ShellCommands

if TYPE_CHECKING:
    from chartdriver.cli.console import CLIConsole


class ClusterDeployer:
    """Deploys a ClusterConfig: repositories first, then releases in order.

    Attributes:
        config: Cluster configuration, read-only for the run
        commands: Shell command executor
        repositories: Repository synchronizer
        installer: Release installer
    """

    def __init__(
        self,
        console: CLIConsole,
        config: ClusterConfig,
        *,
        commands: ShellCommands | None = None,
        value_files: Sequence[str] = (),
        kube_config: str | None = None,
        kube_context: str | None = None,
        dry_run: bool = False,
        work_dir: Path | None = None,
        constants: DeploymentConstants | None = None,
    ) -> None:
        """Initialize the deployer.

        Args:
            console: Rich console wrapper for operator output
            config: Cluster configuration to deploy
            commands: Shell command executor (created for work_dir if omitted)
            value_files: Value files applied to every release, lowest precedence
            kube_config: Kube-config file contents to write before deploying
            kube_context: Kube-config context to switch to before deploying
            dry_run: Render or simulate installs without changing the cluster
            work_dir: Directory charts are fetched into and values/ is read from
            constants: Optional deployment constants
        """
        self.console = console
        self.config = config
        self.kube_config = kube_config
        self.kube_context = kube_context
        self.dry_run = dry_run
        self.constants = constants or DeploymentConstants()

        self.commands = commands or ShellCommands(work_dir)
        self.paths = DeploymentPaths(work_dir, self.constants)
        self.repositories = RepositorySynchronizer(self.commands.helm)
        self.installer = ReleaseInstaller(
            self.commands.helm,
            self.commands.kubectl,
            OverrideResolver(value_files, config.name, self.paths),
            console,
            settings=config.helm,
            dry_run=dry_run,
            work_dir=work_dir,
        )

    def deploy(self) -> None:
        """Run the deployment.

        Raises:
            DeploymentError: The first failure, with the repository or
                             release it happened for
        """
        self.setup_kubeconfig()

        self.console.print_subheader("Helm repositories")
        self.repositories.sync(self.config.helm.repos)
        self.console.ok(f"{len(self.config.helm.repos)} repositories ready")

        self.console.print_subheader("Releases")
        for release in self.config.releases:
            self.installer.install(release)
            verb = "rendered" if self.dry_run and release.uses_kubectl else "installed"
            self.console.ok(f"{release.name} {verb}")

    def setup_kubeconfig(self) -> None:
        """Write the kube-config payload and select the context, if given.

        Without either, kubectl and Helm use their default config lookup.
        Writing the payload replaces any existing file at the kube-config path.

        Raises:
            ConfigError: If the file cannot be written or the context cannot be selected
        """
        if self.kube_config:
            path = self.constants.kubeconfig_path
            logger.warning(f"Creating Kubernetes config, overwriting {path}")
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(self.kube_config, encoding="utf-8")
            except OSError as exc:
                raise ConfigError("Error creating kube config file", details=str(exc)) from exc

        if self.kube_context:
            logger.info(f"Setting Kubernetes context: {self.kube_context}")
            try:
                self.commands.kubectl.use_context(self.kube_context)
            except ExecError as exc:
                raise ConfigError(
                    f"Error setting Kubernetes context {self.kube_context!r}",
                    details=exc.details,
                ) from exc
