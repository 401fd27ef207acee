from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .config import SetupConfig, load_config
from .directives import Directive, HostContext
from .logging_utils import configure_logging
from .manifest import ManifestError, load_manifest
from .pipeline import INSTALL, MISSING, SKIP, DirectiveFailed, RunResult, label, run_directives

logger = logging.getLogger(__name__)


def print_status(status: str, directive: Directive) -> None:
    if status == SKIP:
        print(f"(skip) {label(directive)} already installed")
    elif status == INSTALL:
        print(f"(install) Installing {label(directive)}")
    elif status == MISSING:
        print(f"(missing) {label(directive)}")


def run(
    manifest_path: str,
    *,
    cfg: SetupConfig,
    apply: bool = True,
    ctx: Optional[HostContext] = None,
) -> RunResult:
    """Interpret a manifest and run it against the host."""

    cfg.ensure_dirs()
    directives: List[Directive] = load_manifest(manifest_path)
    ctx = ctx or HostContext.from_config(cfg)
    return run_directives(directives, ctx, report=print_status, apply=apply)


def cmd_setup(args: argparse.Namespace) -> int:
    cfg = _prepare(args)
    result = run(args.manifest, cfg=cfg)
    logger.info("Done: %d installed, %d skipped", len(result.installed), len(result.skipped))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    cfg = _prepare(args)
    result = run(args.manifest, cfg=cfg, apply=False)
    return 0 if result.satisfied else 1


def _prepare(args: argparse.Namespace) -> SetupConfig:
    cfg = load_config(args.config, home=Path(args.home).expanduser() if args.home else None)
    configure_logging(
        log_path=str(Path(args.log).expanduser()) if args.log else str(cfg.log_path),
        verbose=args.verbose,
    )
    return cfg


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="wssetup")
    p.add_argument("--config", default=None, help="Config file (default: ~/.ws/config.yaml if present)")
    p.add_argument("--home", default=None, help="Home directory to provision (default: current user's)")
    p.add_argument("--log", default=None, help="Log file (default: ~/.ws/wssetup.log)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output to the console")

    sub = p.add_subparsers(dest="subcmd", required=True)

    sp = sub.add_parser("setup", help="Setup the workstation from a manifest file")
    sp.add_argument("manifest")
    sp.set_defaults(func=cmd_setup)

    sp = sub.add_parser("check", help="Report which manifest entries are not yet in place")
    sp.add_argument("manifest")
    sp.set_defaults(func=cmd_check)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    try:
        return int(args.func(args))
    except (ManifestError, DirectiveFailed, FileNotFoundError) as e:
        print(f"ERROR: {e}")
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
