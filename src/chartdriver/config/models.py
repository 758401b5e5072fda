"""Cluster configuration models.

The cluster configuration is a read-only input for one deployment run. Keys
may be written in camelCase (``chartPath``, ``deploymentMethod``) or
snake_case; both validate to the same models.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .secrets import SecretSource, coerce_secret

KUBECTL_DEPLOYMENT = "kubectl"
HELM_DEPLOYMENT = "helm"


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class HelmRepo(_ConfigModel):
    """A chart repository to register before installing releases."""

    name: str
    url: str
    username: SecretSource | None = None
    password: SecretSource | None = None

    @field_validator("username", "password", mode="before")
    @classmethod
    def _secret_shorthand(cls, value: Any) -> Any:
        return coerce_secret(value)


class Override(_ConfigModel):
    """A single ``target=value`` override injected with ``--set``."""

    target: str
    value: SecretSource

    @field_validator("value", mode="before")
    @classmethod
    def _secret_shorthand(cls, value: Any) -> Any:
        return coerce_secret(value)

    def resolve(self) -> str:
        """Resolve the override value. Raises SecretResolutionError."""
        return self.value.resolve()


class Release(_ConfigModel):
    """One deployable unit: a chart at a version in a namespace."""

    name: str
    chart_path: str
    version: str
    namespace: str = ""
    deployment_method: str | None = None
    value_files: list[str] = Field(default_factory=list)
    overrides: list[Override] = Field(default_factory=list)

    @property
    def uses_kubectl(self) -> bool:
        """Whether the release is rendered locally and applied with kubectl."""
        return self.deployment_method == KUBECTL_DEPLOYMENT


class HelmSettings(_ConfigModel):
    """Helm-wide settings shared by every release."""

    repos: list[HelmRepo] = Field(default_factory=list)
    debug: bool = False
    log_level: int = 0
    upgrade: bool = False
    service_account: str = ""
    overrides: dict[str, str] = Field(default_factory=dict)


class ClusterConfig(_ConfigModel):
    """Declarative description of what to install on one cluster."""

    name: str = ""
    helm: HelmSettings = Field(default_factory=HelmSettings)
    releases: list[Release] = Field(default_factory=list)
