"""Resolvable secret references.

A secret reference names where a value lives instead of holding it. The value
is only read when ``resolve()`` is called, so a configuration can be loaded
and validated before any credential is available.

Sources:
- literal: the value is written in the configuration itself
- env: the value is read from an environment variable
- file: the value is read from a file (trailing newlines stripped)

In YAML a plain string is shorthand for a literal secret::

    password: s3cr3t
    password: {source: env, name: REPO_PASSWORD}
    password: {source: file, path: /run/secrets/repo-password}
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from chartdriver.errors import SecretResolutionError


class LiteralSecret(BaseModel):
    """Value stored inline in the configuration."""

    model_config = ConfigDict(frozen=True)

    source: Literal["literal"] = "literal"
    value: str

    def resolve(self) -> str:
        return self.value


class EnvSecret(BaseModel):
    """Value read from an environment variable at resolution time."""

    model_config = ConfigDict(frozen=True)

    source: Literal["env"] = "env"
    name: str

    def resolve(self) -> str:
        value = os.environ.get(self.name)
        if value is None:
            raise SecretResolutionError(f"Environment variable {self.name} not set")
        return value


class FileSecret(BaseModel):
    """Value read from a file at resolution time."""

    model_config = ConfigDict(frozen=True)

    source: Literal["file"] = "file"
    path: Path

    def resolve(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8").rstrip("\r\n")
        except (OSError, UnicodeDecodeError) as exc:
            raise SecretResolutionError(
                f"Unable to read secret file {self.path}", details=str(exc)
            ) from exc


SecretSource = Annotated[
    LiteralSecret | EnvSecret | FileSecret, Field(discriminator="source")
]


def coerce_secret(value: Any) -> Any:
    """Turn the plain-string shorthand into a literal secret mapping."""
    if isinstance(value, str):
        return {"source": "literal", "value": value}
    return value
