from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar, Tuple

from .base import HostContext, cli_flags

logger = logging.getLogger(__name__)


@dataclass
class NewGroup:
    kind: ClassVar[str] = "NewGroup"

    name: str
    flags: Tuple[str, ...] = ()

    @property
    def install_flags(self) -> Tuple[str, ...]:
        return cli_flags("new_group", self.flags, {"system"})

    def describe(self) -> str:
        return self.name

    def is_satisfied(self, ctx: HostContext) -> bool:
        prefix = f"{self.name}:"
        with ctx.cfg.group_file.open("r", encoding="utf-8", errors="replace") as f:
            return any(line.startswith(prefix) for line in f)

    def apply(self, ctx: HostContext) -> None:
        ctx.runner.stream(["addgroup", *self.install_flags, self.name], privileged=True)


def parse_groups_output(output: str) -> list[str]:
    # `groups USER` prints "USER : g1 g2"; some platforms omit the prefix.
    line = output.strip()
    if " : " in line:
        line = line.partition(" : ")[2]
    return line.split()


@dataclass
class NewGroupMember:
    kind: ClassVar[str] = "NewGroupMember"

    user: str
    group: str

    def describe(self) -> str:
        return f"{self.user} to {self.group}"

    def is_satisfied(self, ctx: HostContext) -> bool:
        r = ctx.runner.capture(["groups", self.user])
        return r.ok and self.group in parse_groups_output(r.stdout)

    def apply(self, ctx: HostContext) -> None:
        ctx.runner.stream(["adduser", self.user, self.group], privileged=True)
