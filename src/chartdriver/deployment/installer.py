"""Release installation.

Each release is installed with one of two strategies:

- Packaged upgrade (default): ``helm upgrade --install`` with the resolved
  overrides. Helm keeps the release bookkeeping.
- Direct apply (``deploymentMethod: kubectl``): fetch the chart, render it
  with ``helm template`` and pipe the manifests into ``kubectl apply``.

The caller installs releases one at a time in configuration order and stops
at the first ReleaseError.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from chartdriver.config.models import HelmSettings, Release
from chartdriver.errors import ExecError, ReleaseError

from .overrides import OverrideResolver

if TYPE_CHECKING:
    from chartdriver.cli.console import CLIConsole

    from .shell_commands import HelmCommands, KubectlCommands


class ReleaseInstaller:
    """Installs releases sequentially using the strategy each one asks for."""

    def __init__(
        self,
        helm: HelmCommands,
        kubectl: KubectlCommands,
        resolver: OverrideResolver,
        console: CLIConsole,
        *,
        settings: HelmSettings | None = None,
        dry_run: bool = False,
        work_dir: Path | None = None,
    ) -> None:
        """Initialize the installer.

        Args:
            helm: Helm command set
            kubectl: kubectl command set
            resolver: Override resolver for value files and --set values
            console: Console that receives rendered manifests in dry-run mode
            settings: Helm-wide settings (debug, log level)
            dry_run: Simulate installs without changing the cluster
            work_dir: Directory charts are fetched into for direct apply
        """
        self.helm = helm
        self.kubectl = kubectl
        self.resolver = resolver
        self.console = console
        self.settings = settings or HelmSettings()
        self.dry_run = dry_run
        self.work_dir = work_dir

    def install(self, release: Release) -> None:
        """Install one release.

        Raises:
            ReleaseError: Naming the release and the step that failed
        """
        logger.info(f"Installing release: {release.name} @ {release.version}")
        if release.uses_kubectl:
            self._install_via_kubectl(release)
        else:
            self._install_via_helm(release)

    # =========================================================================
    # Packaged upgrade
    # =========================================================================

    def _install_via_helm(self, release: Release) -> None:
        if self.dry_run:
            logger.info(f"Running dry run: {release.name}")
        try:
            self.helm.upgrade_install(
                release.name,
                release.chart_path,
                release.version,
                namespace=release.namespace,
                debug=self.settings.debug,
                log_level=self.settings.log_level,
                overrides=self.resolver.resolve(release),
                dry_run=self.dry_run,
            )
        except ExecError as exc:
            raise ReleaseError(release.name, "helm upgrade", exc) from exc

    # =========================================================================
    # Direct apply
    # =========================================================================

    def _install_via_kubectl(self, release: Release) -> None:
        try:
            self.helm.fetch(release.chart_path, release.version, cwd=self.work_dir)
        except ExecError as exc:
            raise ReleaseError(release.name, "fetch chart", exc) from exc

        try:
            manifests = self.helm.template(
                Path(release.chart_path).name,
                release_name=release.name,
                namespace=release.namespace,
                overrides=self.resolver.resolve(release),
                cwd=self.work_dir,
            )
        except ExecError as exc:
            raise ReleaseError(release.name, "render chart", exc) from exc

        if self.dry_run:
            logger.info(f"Running dry run: {release.name}")
            self.console.print_text(f"rendered chart output:\n{manifests}")
            return

        try:
            self._apply_with_retry(release, manifests)
        except ExecError as exc:
            raise ReleaseError(release.name, "kubectl apply", exc) from exc

    def _apply_with_retry(self, release: Release, manifests: str) -> None:
        """Apply the manifests, retrying exactly once on failure.

        Charts can contain resources that depend on others in the same
        stream (a custom resource before its definition is registered). The
        first pass creates the independent resources and the second pass
        picks up the rest. A second failure means the chart is broken and is
        raised as is.
        """
        try:
            self.kubectl.apply(manifests)
            return
        except ExecError as exc:
            logger.warning(
                f"kubectl apply failed for {release.name} (status {exc.exit_code}), "
                "applying once more"
            )
        self.kubectl.apply(manifests)
