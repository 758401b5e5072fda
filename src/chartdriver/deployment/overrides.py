"""Override resolution for a release.

Helm merges value files left to right and the last one wins, so the order
of the returned arguments is the precedence order:

1. Value files given explicitly for the run
2. values/<release>/default.yaml, if present
3. The release's own value files that exist under the values base (missing
   ones are skipped)
4. values/<release>/<cluster>.yaml, if a cluster name is set and the file exists
5. One combined ``--set`` with every key override that could be resolved

The result is recomputed on every call from the filesystem and the secret
sources; nothing is cached.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from chartdriver.config.models import Release
from chartdriver.errors import SecretResolutionError

from .constants import DeploymentPaths
from .shell_commands.builder import Argument


class OverrideResolver:
    """Computes the value-file and ``--set`` arguments for a release."""

    def __init__(
        self,
        value_files: Sequence[str] = (),
        cluster_name: str = "",
        paths: DeploymentPaths | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            value_files: Value files given explicitly for the whole run
            cluster_name: Name of the target cluster, selects the per-cluster file
            paths: Resolver for the conventional per-release file locations
        """
        self.value_files = [name.strip() for name in value_files]
        self.cluster_name = cluster_name
        self.paths = paths or DeploymentPaths()

    def resolve(self, release: Release) -> list[Argument]:
        """Build the ordered override arguments for a release."""
        args = [self._value_file(path) for path in self.value_files]

        default_file = self.paths.release_default_values(release.name)
        if default_file.exists():
            args.append(self._value_file(str(default_file)))

        for path in release.value_files:
            located = self.paths.locate(path)
            if not located.exists():
                logger.warning(f"Value file does not exist: {located}")
                continue
            args.append(self._value_file(str(located)))

        if self.cluster_name:
            cluster_file = self.paths.cluster_values(release.name, self.cluster_name)
            if cluster_file.exists():
                args.append(self._value_file(str(cluster_file)))

        set_values = self._set_values(release)
        if set_values:
            # May carry credentials
            args.append(Argument.long("set", ",".join(set_values), secret=True))
        return args

    def _value_file(self, path: str) -> Argument:
        logger.info(f"Adding override file: {path}")
        return Argument.short("f", path)

    def _set_values(self, release: Release) -> list[str]:
        set_values: list[str] = []
        for override in release.overrides:
            logger.info(f"Overriding value for: {override.target}")
            try:
                value = override.resolve()
            except SecretResolutionError as exc:
                logger.warning(
                    f"Could not get value for override {override.target!r}, "
                    f"skipping it: {exc.message}"
                )
                continue
            if value == "":
                logger.warning(f"Override value for {override.target!r} is blank")
            set_values.append(f"{override.target}={value}")
        return set_values
