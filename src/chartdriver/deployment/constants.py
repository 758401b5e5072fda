"""Deployment constants and configuration.

This module centralizes the conventional file locations used while
deploying: per-release value files and the kube-config path.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DeploymentConstants:
    """Constants for Helm/kubectl deployment.

    All attributes are class-level and immutable.
    """

    # Per-release values live under values/<release>/
    VALUES_DIR: str = "values"
    DEFAULT_VALUES_FILE: str = "default.yaml"
    VALUES_SUFFIX: str = ".yaml"

    # Written when a kube-config payload is supplied; overwritten without backup
    KUBECONFIG_RELATIVE_PATH: str = ".kube/config"

    @property
    def kubeconfig_path(self) -> Path:
        return Path.home() / self.KUBECONFIG_RELATIVE_PATH


class DeploymentPaths:
    """Path resolver for per-release override files.

    Without ``base_dir`` paths stay relative to the working directory, which
    is also where Helm runs. With ``base_dir`` they are absolute, so Helm
    finds them whatever directory it is started in.
    """

    def __init__(
        self,
        base_dir: Path | None = None,
        constants: DeploymentConstants | None = None,
    ) -> None:
        """Initialize the path resolver.

        Args:
            base_dir: Directory that contains the values/ tree and the release
                      value files. Defaults to the working directory.
            constants: Optional deployment constants
        """
        self.constants = constants or DeploymentConstants()
        self.base_dir = base_dir.resolve() if base_dir else None

    @property
    def values_dir(self) -> Path:
        values = Path(self.constants.VALUES_DIR)
        return self.base_dir / values if self.base_dir else values

    def locate(self, path: str) -> Path:
        """Place a release value file relative to base_dir."""
        if self.base_dir and not Path(path).is_absolute():
            return self.base_dir / path
        return Path(path)

    def release_values_dir(self, release_name: str) -> Path:
        return self.values_dir / release_name

    def release_default_values(self, release_name: str) -> Path:
        """values/<release>/default.yaml"""
        return self.release_values_dir(release_name) / self.constants.DEFAULT_VALUES_FILE

    def cluster_values(self, release_name: str, cluster_name: str) -> Path:
        """values/<release>/<cluster>.yaml"""
        return self.release_values_dir(release_name) / (
            f"{cluster_name}{self.constants.VALUES_SUFFIX}"
        )
