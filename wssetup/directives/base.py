from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol

from ..config import SetupConfig
from ..lib.cache import ContentCache
from ..lib.command import CommandRunner

logger = logging.getLogger(__name__)


class InstallError(RuntimeError):
    """A directive could not reach its desired state."""


@dataclass(frozen=True)
class HostContext:
    """What directives need to look at and change the host."""

    cfg: SetupConfig
    runner: CommandRunner = field(default_factory=CommandRunner)
    # None means the process PATH.
    search_path: Optional[str] = None

    @classmethod
    def from_config(cls, cfg: SetupConfig, **kwargs) -> "HostContext":
        kwargs.setdefault("runner", CommandRunner(sudo=tuple(cfg.sudo)))
        return cls(cfg=cfg, **kwargs)

    @property
    def scripts(self) -> ContentCache:
        return ContentCache(self.cfg.scripts_dir, timeout=self.cfg.download_timeout)

    @property
    def packages(self) -> ContentCache:
        return ContentCache(self.cfg.packages_dir, timeout=self.cfg.download_timeout)


class Directive(Protocol):
    """One declared unit of desired machine state.

    `is_satisfied` must only read host state. `apply` is called only after
    `is_satisfied` returned False, and raises on failure.
    """

    kind: str

    def describe(self) -> str:
        ...

    def is_satisfied(self, ctx: HostContext) -> bool:
        ...

    def apply(self, ctx: HostContext) -> None:
        ...


def cli_flags(kind: str, flags: Iterable[str], allowed: set[str]) -> tuple[str, ...]:
    """Map manifest flags to `--flag` options, dropping ones `kind` does not support."""

    out: list[str] = []
    for f in flags:
        if f in allowed:
            out.append(f"--{f}")
        else:
            logger.warning("Ignoring unknown %s flag %r", kind, f)
    return tuple(out)
