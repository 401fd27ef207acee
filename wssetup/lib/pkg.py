from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from .command import CommandRunner

logger = logging.getLogger(__name__)


def deb_package_name(runner: CommandRunner, deb_file: Path) -> Optional[str]:
    """Read the `Package:` field from a .deb's control metadata."""

    r = runner.capture(["dpkg", "--info", str(deb_file)])
    if not r.ok:
        return None
    return parse_control_field(r.stdout.splitlines(), "Package")


def parse_control_field(lines: Iterable[str], field: str) -> Optional[str]:
    prefix = f"{field}: "
    for line in lines:
        line = line.strip()
        if line.startswith(prefix):
            return line.partition(": ")[2].strip()
    return None


def dpkg_is_installed(runner: CommandRunner, package: str) -> bool:
    r = runner.capture(["dpkg-query", "-W", "-f=${Status}", package])
    return r.ok and r.stdout.strip() == "install ok installed"


def apt_install(runner: CommandRunner, package: str) -> None:
    runner.stream(["apt-get", "install", "--yes", package], privileged=True)


def dpkg_install(runner: CommandRunner, deb_file: Path) -> None:
    runner.stream(["dpkg", "-i", str(deb_file)], privileged=True)


def snap_installed_names(runner: CommandRunner) -> list[str]:
    r = runner.capture(["snap", "list"])
    if not r.ok:
        return []
    names: list[str] = []
    for row in r.stdout.splitlines():
        cols = row.split()
        if cols:
            names.append(cols[0])
    return names


def snap_install(runner: CommandRunner, name: str, flags: Iterable[str] = ()) -> None:
    runner.stream(["snap", "install", name, *flags], privileged=True)
