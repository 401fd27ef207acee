from __future__ import annotations

import logging
import urllib.request
from pathlib import Path
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

URL_SCHEMES = {"http", "https", "ftp", "file"}
USER_AGENT = "wssetup/0.1"


def is_url(source: str) -> bool:
    """True if `source` names a remote (or file://) resource rather than a literal."""

    if any(c.isspace() for c in source.strip()):
        return False
    parsed = urlparse(source.strip())
    if parsed.scheme not in URL_SCHEMES:
        return False
    return bool(parsed.netloc) or parsed.scheme == "file"


def read_url(url: str, *, timeout: float = 60) -> bytes:
    logger.info("GET %s", url)
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        return resp.read()


def download(url: str, dest: Path, *, timeout: float = 60) -> Path:
    """Download `url` into `dest`.

    The body is written to a `.part` sibling first and renamed into place, so
    an interrupted download never leaves a file at `dest`.
    """

    data = read_url(url, timeout=timeout)
    dest.parent.mkdir(parents=True, exist_ok=True)
    tmp = dest.with_name(dest.name + ".part")
    tmp.write_bytes(data)
    tmp.replace(dest)
    logger.info("Downloaded %s -> %s (%d bytes)", url, str(dest), len(data))
    return dest
