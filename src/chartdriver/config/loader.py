"""Cluster configuration loading with environment variable substitution."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import ValidationError

from chartdriver.errors import ConfigError

from .models import ClusterConfig

CONFIG_PATH = Path("cluster.yaml")

_PLACEHOLDER = re.compile(
    r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?:(?P<op>:[-?])(?P<arg>[^}]*))?\}"
)


def load_env_file(path: Path) -> bool:
    """Load a .env file into the process environment.

    Variables already set in the environment win over the file.

    Returns:
        True if the file existed and was loaded
    """
    if not path.is_file():
        logger.debug(f"No env file at {path}")
        return False
    logger.info(f"Loading environment from {path}")
    return load_dotenv(path, override=False)


def substitute_env_vars(text: str) -> str:
    """Expand environment placeholders in a config document.

    ``${VAR}`` and ``${VAR:?message}`` must be set. ``${VAR:-default}`` falls
    back to the default. Full-line YAML comments are left as they are.

    Raises:
        ConfigError: If a required variable is not set
    """

    def expand(match: re.Match[str]) -> str:
        name, op, arg = match.group("name", "op", "arg")
        value = os.environ.get(name)
        if value is not None:
            return value
        if op == ":-":
            return arg
        reason = arg if op == ":?" else "not set"
        raise ConfigError(f"Required environment variable {name}: {reason}")

    return "".join(
        line if line.lstrip().startswith("#") else _PLACEHOLDER.sub(expand, line)
        for line in text.splitlines(keepends=True)
    )


def load_cluster_config(file_path: Path = CONFIG_PATH) -> ClusterConfig:
    """
    Load and validate a cluster configuration file.

    Args:
        file_path: Path to the YAML file (default: cluster.yaml)

    Returns:
        Validated ClusterConfig

    Raises:
        ConfigError: If the file is missing, a required environment variable
                     is unset, the YAML is malformed, or validation fails
    """
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read cluster config {file_path}", details=str(e)) from e

    content = substitute_env_vars(content)

    try:
        loaded: Any = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML in {file_path}", details=str(e)) from e

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Invalid cluster config {file_path}: expected a mapping at top level")

    try:
        config = ClusterConfig.model_validate(loaded)
    except ValidationError as e:
        raise ConfigError(f"Invalid cluster config {file_path}", details=str(e)) from e

    logger.info(
        f"Loaded cluster config {config.name or '<unnamed>'!r}: "
        f"{len(config.helm.repos)} repos, {len(config.releases)} releases"
    )
    return config
