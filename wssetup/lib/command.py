from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Sequence

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    def __init__(self, argv: Sequence[str], returncode: int, detail: str = "") -> None:
        msg = f"Command failed ({returncode}): {_fmt_argv(argv)}"
        if detail:
            msg += f"\n{detail}"
        super().__init__(msg)
        self.argv = list(argv)
        self.returncode = returncode


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
) -> CmdResult:
    """Run a command and capture its output.

    A command that cannot be started at all (missing binary) is reported as
    returncode 127, the same way a shell would. Output that is not valid
    UTF-8 is decoded with replacement characters.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    try:
        p = subprocess.run(
            argv_list,
            encoding="utf-8",
            errors="replace",
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except FileNotFoundError as e:
        if check:
            raise CommandError(argv_list, 127, str(e)) from e
        return CmdResult(argv=argv_list, returncode=127, stdout="", stderr=str(e))

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise CommandError(argv_list, p.returncode, p.stderr)

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def stream_cmd(
    argv: Sequence[str],
    *,
    echo: Callable[[str], None] = print,
    check: bool = True,
) -> int:
    """Run a command, echoing each output line as it arrives.

    stderr is folded into stdout so the operator sees one ordered stream.
    If reading or echoing fails the child is killed and reaped before the
    error propagates.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    try:
        proc = subprocess.Popen(
            argv_list,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as e:
        raise CommandError(argv_list, 127, str(e)) from e

    try:
        if proc.stdout:
            for line in proc.stdout:
                line = line.rstrip("\n")
                logger.debug("OUT %s", line)
                echo(line)
    except BaseException:
        proc.kill()
        raise
    finally:
        proc.wait()
        if proc.stdout:
            proc.stdout.close()

    if check and proc.returncode != 0:
        raise CommandError(argv_list, proc.returncode)
    return proc.returncode


@dataclass
class CommandRunner:
    """Runs host commands for directives.

    `sudo` is the privilege-escalation prefix put in front of privileged
    commands; an empty prefix runs them as the current user.
    """

    sudo: Sequence[str] = ("sudo",)
    echo: Callable[[str], None] = field(default=print)

    def _argv(self, argv: Sequence[str], privileged: bool) -> list[str]:
        return [*self.sudo, *argv] if privileged else list(argv)

    def capture(self, argv: Sequence[str], *, privileged: bool = False) -> CmdResult:
        """Read-only query; never raises on a non-zero exit."""
        return run_cmd(self._argv(argv, privileged), check=False)

    def stream(self, argv: Sequence[str], *, privileged: bool = False) -> None:
        stream_cmd(self._argv(argv, privileged), echo=self.echo)
