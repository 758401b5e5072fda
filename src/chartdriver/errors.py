"""Exception hierarchy for chartdriver.

Every error raised while preparing or running a deployment derives from
DeploymentError so the CLI can render it uniformly. Errors that wrap a
lower-level failure keep it as ``__cause__`` and name the entity (repository
or release) they were raised for.
"""

from __future__ import annotations


class DeploymentError(Exception):
    """Raised when a deployment operation fails."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigError(DeploymentError):
    """Malformed or missing configuration, or an unresolvable required secret."""


class SecretResolutionError(DeploymentError):
    """A secret reference could not produce a value."""


class ExecError(DeploymentError):
    """A subprocess exited with a nonzero status or could not be started."""

    def __init__(self, exit_code: int, stderr: str = "", command: str = ""):
        self.exit_code = exit_code
        self.stderr = stderr
        self.command = command
        message = f"command exited with status {exit_code}"
        if command:
            message = f"{command!r} exited with status {exit_code}"
        super().__init__(message, details=stderr.strip() or None)


class RepositoryError(DeploymentError):
    """Adding or refreshing a chart repository failed.

    ``repo`` is None when the failing command was the repository refresh,
    which covers every configured repository at once.
    """

    def __init__(self, repo: str | None, cause: DeploymentError):
        self.repo = repo
        self.cause = cause
        action = f"adding Helm repo {repo!r}" if repo else "updating Helm repos"
        super().__init__(f"Error {action}: {cause.message}", cause.details)


class ReleaseError(DeploymentError):
    """Installing a release failed at some step."""

    def __init__(self, release: str, step: str, cause: DeploymentError):
        self.release = release
        self.step = step
        self.cause = cause
        super().__init__(
            f"Error installing release {release!r} ({step}): {cause.message}",
            cause.details,
        )
