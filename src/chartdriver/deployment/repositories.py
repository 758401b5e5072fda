"""Chart repository synchronization."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from loguru import logger

from chartdriver.config.models import HelmRepo
from chartdriver.config.secrets import SecretSource
from chartdriver.errors import ConfigError, ExecError, RepositoryError, SecretResolutionError

if TYPE_CHECKING:
    from .shell_commands import HelmCommands


class RepositorySynchronizer:
    """Registers every configured repository, then refreshes the cache once.

    A repository whose credentials cannot be resolved is a configuration
    error and stops the run before its ``repo add`` is attempted.
    """

    def __init__(self, helm: HelmCommands) -> None:
        self.helm = helm

    def sync(self, repos: Sequence[HelmRepo]) -> None:
        """Add all repositories, then run a single ``helm repo update``.

        Raises:
            ConfigError: If a repository credential cannot be resolved
            RepositoryError: If an add or the update fails
        """
        for repo in repos:
            self.add(repo)

        logger.info("Updating Helm repos")
        try:
            self.helm.repo_update()
        except ExecError as exc:
            raise RepositoryError(None, exc) from exc

    def add(self, repo: HelmRepo) -> None:
        logger.info(f"Adding Helm repo: {repo.name}")
        username = self._credential(repo, "username", repo.username)
        password = self._credential(repo, "password", repo.password)
        try:
            self.helm.repo_add(repo.name, repo.url, username=username, password=password)
        except ExecError as exc:
            raise RepositoryError(repo.name, exc) from exc

    @staticmethod
    def _credential(repo: HelmRepo, field: str, source: SecretSource | None) -> str | None:
        if source is None:
            return None
        try:
            return source.resolve()
        except SecretResolutionError as exc:
            raise ConfigError(
                f"Could not get {field} for Helm repo {repo.name!r}: {exc.message}",
                exc.details,
            ) from exc
