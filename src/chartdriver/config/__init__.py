"""Cluster configuration: models, secret references and loading."""

from .loader import load_cluster_config, load_env_file, substitute_env_vars
from .models import ClusterConfig, HelmRepo, HelmSettings, Override, Release
from .secrets import EnvSecret, FileSecret, LiteralSecret, SecretSource

__all__ = [
    "ClusterConfig",
    "HelmRepo",
    "HelmSettings",
    "Override",
    "Release",
    "EnvSecret",
    "FileSecret",
    "LiteralSecret",
    "SecretSource",
    "load_cluster_config",
    "load_env_file",
    "substitute_env_vars",
]
