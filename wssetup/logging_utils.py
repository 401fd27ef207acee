from __future__ import annotations

import logging
from pathlib import Path

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _open_log_file(log_path: Path) -> tuple[logging.Handler, Path]:
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path), log_path
    except OSError:
        fallback = Path.cwd() / "wssetup.log"
        return logging.FileHandler(fallback), fallback


def configure_logging(log_path: str, *, verbose: bool = False) -> str:
    """Send everything at INFO and up to the run log.

    The console only gets warnings, since the operator already sees one
    status line per directive plus streamed command output; `verbose`
    turns on DEBUG for both. An unwritable log location falls back to
    `./wssetup.log`.

    Safe to call more than once. Returns the log file actually used.
    """

    root = logging.getLogger()
    existing = getattr(root, "_wssetup_log_path", None)
    if existing is not None:
        return existing

    level = logging.DEBUG if verbose else logging.INFO
    root.setLevel(level)

    file_handler, chosen = _open_log_file(Path(log_path))
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    file_handler.setLevel(level)
    root.addHandler(file_handler)

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.addHandler(console)

    setattr(root, "_wssetup_log_path", str(chosen))
    logging.getLogger(__name__).info("Logging to %s (requested %s)", chosen, log_path)
    return str(chosen)
