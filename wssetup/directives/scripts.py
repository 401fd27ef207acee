from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar

from ..lib.net import download
from .base import HostContext

logger = logging.getLogger(__name__)


@dataclass
class Script:
    """A remote shell script, run once.

    The cached download doubles as the record that the script has run, so
    it only moves into the cache once the script exits cleanly.
    """

    kind: ClassVar[str] = "Script"

    source: str

    def describe(self) -> str:
        return self.source

    def is_satisfied(self, ctx: HostContext) -> bool:
        return ctx.scripts.has(self.source)

    def apply(self, ctx: HostContext) -> None:
        cached = ctx.scripts.path_for(self.source)
        pending = cached.with_name(cached.name + ".pending")
        download(self.source, pending, timeout=ctx.cfg.download_timeout)
        try:
            ctx.runner.stream(["bash", str(pending)])
        except BaseException:
            pending.unlink(missing_ok=True)
            raise
        pending.replace(cached)
        logger.info("Cached %s as %s", self.source, str(cached))


@dataclass
class Command:
    kind: ClassVar[str] = "Command"

    cmd: str

    def describe(self) -> str:
        return self.cmd

    def is_satisfied(self, ctx: HostContext) -> bool:
        return False

    def apply(self, ctx: HostContext) -> None:
        for line in self.cmd.splitlines():
            if line.strip():
                ctx.runner.stream(["bash", "-c", line])
