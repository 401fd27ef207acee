"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence, Set, Tuple

import pytest

from wssetup.config import SetupConfig
from wssetup.directives import HostContext
from wssetup.lib.command import CmdResult, CommandError, CommandRunner


class FakeRunner(CommandRunner):
    """Records commands and models the host state they read and change."""

    def __init__(self, group_file: Path) -> None:
        super().__init__(sudo=("sudo",), echo=lambda line: None)
        self.group_file = group_file
        self.calls: List[Tuple[List[str], bool]] = []
        self.git: Dict[str, str] = {}
        self.snaps: Set[str] = set()
        self.debs: Set[str] = set()
        self.deb_names: Dict[str, str] = {}
        self.memberships: Dict[str, Set[str]] = {}
        self.gsettings: Dict[Tuple[str, str], str] = {}
        self.fail: Set[str] = set()

    # Host model

    def _ok(self, argv: Sequence[str], stdout: str = "") -> CmdResult:
        return CmdResult(argv=list(argv), returncode=0, stdout=stdout, stderr="")

    def _err(self, argv: Sequence[str], code: int = 1) -> CmdResult:
        return CmdResult(argv=list(argv), returncode=code, stdout="", stderr="error")

    def _dispatch(self, argv: Sequence[str]) -> CmdResult:
        a = list(argv)
        if a[0] in self.fail:
            return self._err(a)
        if a[:4] == ["git", "config", "--global", "--get"]:
            key = a[4]
            return self._ok(a, self.git[key] + "\n") if key in self.git else self._err(a)
        if a[:3] == ["git", "config", "--global"]:
            self.git[a[3]] = a[4]
            return self._ok(a)
        if a == ["snap", "list"]:
            rows = ["Name  Version  Rev  Tracking  Publisher  Notes"]
            rows += [f"{n}  1.0  1  latest/stable  someone  -" for n in sorted(self.snaps)]
            return self._ok(a, "\n".join(rows) + "\n")
        if a[:2] == ["snap", "install"]:
            self.snaps.add(a[2])
            return self._ok(a)
        if a[0] == "dpkg-query":
            return self._ok(a, "install ok installed") if a[-1] in self.debs else self._err(a)
        if a[:2] == ["apt-get", "install"]:
            self.debs.add(a[-1])
            return self._ok(a)
        if a[:2] == ["dpkg", "--info"]:
            name = self.deb_names.get(a[2])
            if name is None:
                return self._err(a, 2)
            return self._ok(a, f" new Debian package, version 2.0.\n Package: {name}\n Version: 1.0\n")
        if a[:2] == ["dpkg", "-i"]:
            self.debs.add(self.deb_names[a[2]])
            return self._ok(a)
        if a[0] == "groups":
            user = a[1]
            return self._ok(a, f"{user} : {user} " + " ".join(sorted(self.memberships.get(user, ()))) + "\n")
        if a[0] == "adduser":
            self.memberships.setdefault(a[1], set()).add(a[2])
            return self._ok(a)
        if a[0] == "addgroup":
            with self.group_file.open("a", encoding="utf-8") as f:
                f.write(f"{a[-1]}:x:999:\n")
            return self._ok(a)
        if a[:2] == ["gsettings", "get"]:
            key = (a[2], a[3])
            return self._ok(a, self.gsettings[key] + "\n") if key in self.gsettings else self._err(a)
        if a[:2] == ["gsettings", "set"]:
            self.gsettings[(a[2], a[3])] = a[4]
            return self._ok(a)
        return self._ok(a)

    # CommandRunner interface

    def capture(self, argv: Sequence[str], *, privileged: bool = False) -> CmdResult:
        self.calls.append((list(argv), privileged))
        return self._dispatch(argv)

    def stream(self, argv: Sequence[str], *, privileged: bool = False) -> None:
        self.calls.append((list(argv), privileged))
        r = self._dispatch(argv)
        if not r.ok:
            raise CommandError(argv, r.returncode)

    def commands(self) -> List[List[str]]:
        return [argv for argv, _ in self.calls]


@pytest.fixture
def home(tmp_path: Path) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def cfg(home: Path, tmp_path: Path) -> SetupConfig:
    group_file = tmp_path / "group"
    group_file.write_text("root:x:0:\nsudo:x:27:ada\n", encoding="utf-8")
    install_dir = tmp_path / "usr-local-bin"
    install_dir.mkdir()
    c = SetupConfig(
        raw={
            "paths": {"group_file": str(group_file), "install_bin_dir": str(install_dir)},
            "sudo": [],
        },
        home=home,
    )
    c.ensure_dirs()
    return c


@pytest.fixture
def fake_runner(cfg: SetupConfig) -> FakeRunner:
    return FakeRunner(cfg.group_file)


@pytest.fixture
def ctx(cfg: SetupConfig, fake_runner: FakeRunner) -> HostContext:
    return HostContext(cfg=cfg, runner=fake_runner, search_path=str(cfg.install_bin_dir))


@pytest.fixture
def real_ctx(cfg: SetupConfig) -> HostContext:
    """Context with a real runner and no privilege prefix."""
    return HostContext.from_config(
        cfg, runner=CommandRunner(sudo=(), echo=lambda line: None), search_path=str(cfg.install_bin_dir)
    )
