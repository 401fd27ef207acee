from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_NAME = "config.yaml"


def _path(value: Any) -> Path:
    return Path(str(value)).expanduser()


@dataclass(frozen=True)
class SetupConfig:
    raw: Dict[str, Any] = field(default_factory=dict)
    home: Path = field(default_factory=Path.home)

    def _paths(self) -> Dict[str, Any]:
        return self.raw.get("paths") or {}

    @property
    def state_dir(self) -> Path:
        return _path(self._paths().get("state_dir") or self.home / ".ws")

    @property
    def scripts_dir(self) -> Path:
        return _path(self._paths().get("scripts_dir") or self.state_dir / "scripts")

    @property
    def packages_dir(self) -> Path:
        return _path(self._paths().get("packages_dir") or self.state_dir / "packages")

    @property
    def bin_dir(self) -> Path:
        return _path(self._paths().get("bin_dir") or self.state_dir / "bin")

    @property
    def install_bin_dir(self) -> Path:
        return _path(self._paths().get("install_bin_dir") or "/usr/local/bin")

    @property
    def rc_file(self) -> Path:
        return _path(self._paths().get("rc_file") or self.home / ".bashrc")

    @property
    def group_file(self) -> Path:
        return _path(self._paths().get("group_file") or "/etc/group")

    @property
    def log_path(self) -> Path:
        return _path(self._paths().get("log_path") or self.state_dir / "wssetup.log")

    @property
    def sudo(self) -> List[str]:
        v = self.raw.get("sudo", ["sudo"])
        if isinstance(v, str):
            return v.split()
        return [str(x) for x in (v or [])]

    @property
    def download_timeout(self) -> float:
        return float(self.raw.get("download_timeout") or 60)

    def ensure_dirs(self) -> None:
        for p in (self.scripts_dir, self.packages_dir, self.bin_dir):
            p.mkdir(parents=True, exist_ok=True)


def default_config_path(home: Optional[Path] = None) -> Path:
    return (home or Path.home()) / ".ws" / DEFAULT_CONFIG_NAME


def load_config(path: Optional[str] = None, *, home: Optional[Path] = None) -> SetupConfig:
    """Load configuration from YAML.

    With no explicit path the default `~/.ws/config.yaml` is used when present;
    otherwise built-in defaults apply.
    """

    home = home or Path.home()
    if path is None:
        p = default_config_path(home)
        if not p.exists():
            return SetupConfig(raw={}, home=home)
    else:
        p = _path(path)
        if not p.exists():
            raise FileNotFoundError(path)

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{p} must contain a mapping/object")

    logger.info("Loaded config %s", str(p))
    return SetupConfig(raw=raw, home=home)
