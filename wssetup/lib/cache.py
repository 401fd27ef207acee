from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path

from .net import download

logger = logging.getLogger(__name__)


def cache_key(source: str) -> str:
    """Stable cache key for a source identifier (SHA-1 hex of its UTF-8 bytes)."""

    return hashlib.sha1(source.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ContentCache:
    """Downloads keyed by the hash of their source.

    Presence of the file is the whole staleness policy: once fetched, a source
    is never fetched again even if the remote content changes.
    """

    root: Path
    timeout: float = 60

    def path_for(self, source: str) -> Path:
        return self.root / cache_key(source)

    def has(self, source: str) -> bool:
        return self.path_for(source).is_file()

    def fetch(self, source: str) -> Path:
        p = self.path_for(source)
        if p.is_file():
            logger.debug("Cache hit %s -> %s", source, str(p))
            return p
        return download(source, p, timeout=self.timeout)
