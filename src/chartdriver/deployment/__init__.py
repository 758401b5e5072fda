"""Deployment package for installing releases onto a cluster.

The package is organized into:
- shell_commands: Typed command construction and execution for helm/kubectl
- overrides: Value-file and --set resolution per release
- repositories: Chart repository synchronization
- installer: Per-release installation strategies
- deployer: The ClusterDeployer that runs all of the above in order

Usage:
    from chartdriver.deployment import ClusterDeployer

    deployer = ClusterDeployer(console, config, dry_run=True)
    deployer.deploy()
"""

from chartdriver.errors import DeploymentError

from .deployer import ClusterDeployer
from .installer import ReleaseInstaller
from .overrides import OverrideResolver
from .repositories import RepositorySynchronizer

__all__ = [
    "ClusterDeployer",
    "DeploymentError",
    "OverrideResolver",
    "ReleaseInstaller",
    "RepositorySynchronizer",
]
