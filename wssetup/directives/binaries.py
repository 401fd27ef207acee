from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional
from urllib.parse import unquote, urlparse

from ..lib.archive import GZ, TAR_GZ, find_entry, gunzip, unpack_tarball
from ..lib.net import download
from .base import HostContext, InstallError

logger = logging.getLogger(__name__)


@dataclass
class Bin:
    """An executable fetched from a URL and installed under a command name.

    `.tar.gz` artifacts are unpacked and searched for a file named like the
    command; `.gz` artifacts are decompressed; anything else is installed as
    downloaded.
    """

    kind: ClassVar[str] = "Bin"

    source: str
    name: Optional[str] = None

    @property
    def source_filename(self) -> str:
        return unquote(urlparse(self.source).path).rstrip("/").split("/")[-1]

    @property
    def command(self) -> str:
        return self.name or self.source_filename.partition(".")[0]

    def describe(self) -> str:
        return self.source

    def destination(self, ctx: HostContext) -> Path:
        return ctx.cfg.install_bin_dir / self.command

    def is_satisfied(self, ctx: HostContext) -> bool:
        return shutil.which(self.command, path=ctx.search_path) is not None

    def stage(self, ctx: HostContext) -> Path:
        staged = download(
            self.source,
            ctx.cfg.bin_dir / self.source_filename,
            timeout=ctx.cfg.download_timeout,
        )
        staged.chmod(0o755)
        return staged

    def resolve_executable(self, staged: Path) -> Path:
        filename = staged.name
        if filename.endswith(TAR_GZ):
            unpacked = unpack_tarball(staged)
            found = find_entry(unpacked, self.command)
            if found is None:
                raise InstallError(f"No file named {self.command!r} inside {self.source}")
            logger.info("Found %s in archive at %s", self.command, str(found))
            return found
        if filename.endswith(GZ):
            return gunzip(staged)
        return staged

    def apply(self, ctx: HostContext) -> None:
        executable = self.resolve_executable(self.stage(ctx))
        ctx.runner.stream(["cp", str(executable), str(self.destination(ctx))], privileged=True)
