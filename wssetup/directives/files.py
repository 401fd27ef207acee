from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Optional

from ..lib.net import is_url, read_url
from .base import HostContext

logger = logging.getLogger(__name__)

START_MARKER = "# WS_START"
END_MARKER = "# WS_END"


@dataclass
class Directory:
    kind: ClassVar[str] = "Directory"

    path: str

    @property
    def target(self) -> Path:
        return Path(self.path).expanduser()

    def describe(self) -> str:
        return self.path

    def is_satisfied(self, ctx: HostContext) -> bool:
        return self.target.is_dir()

    def apply(self, ctx: HostContext) -> None:
        self.target.mkdir(parents=True, exist_ok=True)


def code_hash(code: str) -> str:
    return hashlib.sha1(code.encode("utf-8")).hexdigest()


def render_block(code: str) -> str:
    h = code_hash(code)
    return f"\n{START_MARKER} {h}\n\n{code.strip()}\n\n{END_MARKER} {h}\n"


@dataclass
class BashRC:
    """A block of shell code appended to the rc file.

    Blocks are identified by the hash of their code and only ever appended:
    editing the code in the manifest adds a new block next to the old one.
    """

    kind: ClassVar[str] = "BashRC"

    source: str
    _code: Optional[str] = field(default=None, init=False, repr=False, compare=False)

    def describe(self) -> str:
        return "Appending some code to .bashrc"

    def code(self, ctx: HostContext) -> str:
        if self._code is None:
            if is_url(self.source):
                self._code = read_url(self.source, timeout=ctx.cfg.download_timeout).decode("utf-8")
            else:
                self._code = self.source
        return self._code

    def sentinel(self, ctx: HostContext) -> str:
        return f"{START_MARKER} {code_hash(self.code(ctx))}"

    def is_satisfied(self, ctx: HostContext) -> bool:
        rc = ctx.cfg.rc_file
        if not rc.exists():
            return False
        sentinel = self.sentinel(ctx)
        with rc.open("r", encoding="utf-8", errors="replace") as f:
            return any(line.strip() == sentinel for line in f)

    def apply(self, ctx: HostContext) -> None:
        rc = ctx.cfg.rc_file
        rc.parent.mkdir(parents=True, exist_ok=True)
        with rc.open("a", encoding="utf-8") as f:
            f.write(render_block(self.code(ctx)))
        logger.info("Appended block %s to %s", code_hash(self.code(ctx)), str(rc))
