from __future__ import annotations

import gzip
import logging
import shutil
import tarfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

TAR_GZ = ".tar.gz"
GZ = ".gz"


def strip_suffix(path: Path, suffix: str) -> Path:
    name = path.name
    if not name.endswith(suffix):
        raise ValueError(f"{path} does not end with {suffix}")
    return path.with_name(name[: -len(suffix)])


def unpack_tarball(archive: Path) -> Path:
    """Unpack `archive` into a sibling directory named without `.tar.gz`.

    Anything left in that directory by an earlier unpack is removed first.
    """

    out = strip_suffix(archive, TAR_GZ)
    if out.exists():
        shutil.rmtree(out)
    out.mkdir(parents=True)
    with tarfile.open(archive, "r:gz") as tf:
        tf.extractall(out, filter="data")
    logger.info("Unpacked %s -> %s", str(archive), str(out))
    return out


def gunzip(archive: Path) -> Path:
    """Decompress `archive` into a sibling file named without `.gz`, marked executable."""

    out = strip_suffix(archive, GZ)
    with gzip.open(archive, "rb") as src, out.open("wb") as dst:
        shutil.copyfileobj(src, dst)
    out.chmod(0o755)
    logger.info("Decompressed %s -> %s", str(archive), str(out))
    return out


def find_entry(root: Path, name: str) -> Optional[Path]:
    """First file under `root` (depth-first, sorted) whose filename is exactly `name`."""

    for p in sorted(root.rglob("*")):
        if p.name == name and p.is_file():
            return p
    return None
