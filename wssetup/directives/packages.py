from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Optional, Tuple

from ..lib.net import is_url
from ..lib.pkg import (
    apt_install,
    deb_package_name,
    dpkg_install,
    dpkg_is_installed,
    snap_install,
    snap_installed_names,
)
from .base import HostContext, InstallError, cli_flags

logger = logging.getLogger(__name__)


@dataclass
class SnapPackage:
    kind: ClassVar[str] = "SnapPackage"

    name: str
    flags: Tuple[str, ...] = ()

    @property
    def install_flags(self) -> Tuple[str, ...]:
        return cli_flags("snap", self.flags, {"classic"})

    def describe(self) -> str:
        return self.name

    def is_satisfied(self, ctx: HostContext) -> bool:
        return self.name in snap_installed_names(ctx.runner)

    def apply(self, ctx: HostContext) -> None:
        snap_install(ctx.runner, self.name, self.install_flags)


@dataclass
class AptPackage:
    """A Debian package, named directly or given as a URL to a .deb file.

    For URL sources the package name comes from the downloaded file's
    control metadata; the file itself is kept in the package cache.
    """

    kind: ClassVar[str] = "AptPackage"

    source: str
    _name: Optional[str] = field(default=None, init=False, repr=False, compare=False)

    @property
    def is_deb_url(self) -> bool:
        return is_url(self.source)

    def describe(self) -> str:
        return self.source

    def deb_file(self, ctx: HostContext) -> Path:
        return ctx.packages.fetch(self.source)

    def package_name(self, ctx: HostContext) -> str:
        if self._name is None:
            if self.is_deb_url:
                name = deb_package_name(ctx.runner, self.deb_file(ctx))
                if not name:
                    raise InstallError(f"No Package field in metadata of {self.source}")
                logger.info("Resolved %s to package %s", self.source, name)
                self._name = name
            else:
                self._name = self.source
        return self._name

    def is_satisfied(self, ctx: HostContext) -> bool:
        return dpkg_is_installed(ctx.runner, self.package_name(ctx))

    def apply(self, ctx: HostContext) -> None:
        if self.is_deb_url:
            dpkg_install(ctx.runner, self.deb_file(ctx))
        else:
            apt_install(ctx.runner, self.source)
