"""Typed command-line construction.

Commands are assembled from Argument values instead of bare strings so that
each argument knows how it is spelled on the command line and whether its
value is sensitive. The literal values go to the subprocess; the rendered
form used for logging masks every secret value.

Example:
    >>> cmd = (
    ...     CommandBuilder("helm")
    ...     .raw("repo", "add", "charts", "https://charts.example.com")
    ...     .long("password", "hunter2", secret=True)
    ...     .build()
    ... )
    >>> cmd.render()
    'helm repo add charts https://charts.example.com --password ******'
"""

from __future__ import annotations

import shlex
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

SECRET_MASK = "******"


class ArgKind(Enum):
    """How an argument is spelled on the command line."""

    RAW = "raw"
    SHORT_FLAG = "short"
    LONG_FLAG = "long"


@dataclass(frozen=True)
class Argument:
    """One subprocess argument.

    Attributes:
        kind: Spelling of the argument (literal token, ``-name`` or ``--name``)
        value: Argument value. For flags, None means the flag is unset and is
            left out of the command entirely; an empty string is still passed.
        name: Flag name without dashes; must be empty for RAW arguments
        secret: Whether the value must be masked when the command is rendered
    """

    kind: ArgKind
    value: str | None
    name: str = ""
    secret: bool = False

    def __post_init__(self) -> None:
        if self.kind is ArgKind.RAW:
            if self.name:
                raise ValueError(f"raw argument cannot have a name: {self.name!r}")
            if self.value is None:
                raise ValueError("raw argument requires a value")
        elif not self.name:
            raise ValueError(f"{self.kind.value} flag requires a name")

    @classmethod
    def raw(cls, value: str, *, secret: bool = False) -> Argument:
        return cls(ArgKind.RAW, value, secret=secret)

    @classmethod
    def short(cls, name: str, value: str | None, *, secret: bool = False) -> Argument:
        return cls(ArgKind.SHORT_FLAG, value, name=name, secret=secret)

    @classmethod
    def long(cls, name: str, value: str | None, *, secret: bool = False) -> Argument:
        return cls(ArgKind.LONG_FLAG, value, name=name, secret=secret)

    def tokens(self, *, masked: bool = False) -> list[str]:
        """Expand the argument into command-line tokens.

        Args:
            masked: Replace a secret value with SECRET_MASK

        Returns:
            Zero, one or two tokens
        """
        if self.value is None:
            return []
        value = SECRET_MASK if masked and self.secret else self.value
        match self.kind:
            case ArgKind.RAW:
                return [value]
            case ArgKind.SHORT_FLAG:
                return [f"-{self.name}", value]
            case ArgKind.LONG_FLAG:
                return [f"--{self.name}", value]


@dataclass(frozen=True)
class Invocation:
    """An immutable program plus its ordered arguments."""

    program: str
    args: tuple[Argument, ...] = ()

    @property
    def argv(self) -> list[str]:
        """Literal argument vector passed to the subprocess."""
        argv = [self.program]
        for arg in self.args:
            argv.extend(arg.tokens())
        return argv

    def render(self) -> str:
        """Human-readable command line with secret values masked."""
        return render(self)


def render(invocation: Invocation) -> str:
    """Render an invocation for logging.

    Every token is shell-quoted except mask tokens, so the output can be
    copied into a shell once the secrets are filled back in.
    """
    parts = [shlex.quote(invocation.program)]
    for arg in invocation.args:
        for token in arg.tokens(masked=True):
            if arg.secret and token == SECRET_MASK:
                parts.append(token)
            else:
                parts.append(shlex.quote(token))
    return " ".join(parts)


class CommandBuilder:
    """Accumulates arguments and builds Invocations.

    Order of ``add`` calls is preserved because it is significant to the
    tools being driven (for instance Helm's last-file-wins value merging).
    """

    def __init__(self, program: str) -> None:
        self.program = program
        self._args: list[Argument] = []

    def add(self, arg: Argument) -> CommandBuilder:
        self._args.append(arg)
        return self

    def extend(self, args: Iterable[Argument]) -> CommandBuilder:
        for arg in args:
            self.add(arg)
        return self

    def raw(self, *values: str) -> CommandBuilder:
        for value in values:
            self.add(Argument.raw(value))
        return self

    def short(self, name: str, value: str | None, *, secret: bool = False) -> CommandBuilder:
        return self.add(Argument.short(name, value, secret=secret))

    def long(self, name: str, value: str | None, *, secret: bool = False) -> CommandBuilder:
        return self.add(Argument.long(name, value, secret=secret))

    def build(self) -> Invocation:
        """Snapshot the pending arguments into an Invocation."""
        return Invocation(self.program, tuple(self._args))
