"""Bundler run context."""

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from vite_bridge.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ("Command", "RunContext")

Command = Literal["serve", "build"]


@dataclass(frozen=True)
class RunContext:
    """Per-invocation data supplied by the host bundler.

    Attributes:
        command: ``serve`` while the dev server runs, ``build`` for production bundles.
        mode: The bundler mode. Defaults to ``development`` when serving and ``production`` when building.
        environ: Snapshot of the process environment.
    """

    command: Command
    mode: "str | None" = None
    environ: "Mapping[str, str]" = field(default_factory=lambda: dict(os.environ))

    def __post_init__(self) -> None:
        if self.command not in {"serve", "build"}:
            msg = f"Unknown bundler command {self.command!r}. Expected 'serve' or 'build'."
            raise ConfigurationError(msg)
        if self.mode is None:
            object.__setattr__(self, "mode", "development" if self.command == "serve" else "production")

    @property
    def is_serve(self) -> bool:
        return self.command == "serve"

    @property
    def is_production_build(self) -> bool:
        return self.command == "build" and self.mode == "production"
