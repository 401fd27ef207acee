from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar

from .base import HostContext

logger = logging.getLogger(__name__)


@dataclass
class GitConf:
    kind: ClassVar[str] = "GitConf"

    key: str
    value: str

    def describe(self) -> str:
        return self.key

    def is_satisfied(self, ctx: HostContext) -> bool:
        r = ctx.runner.capture(["git", "config", "--global", "--get", self.key])
        return r.ok and r.stdout.strip() == self.value

    def apply(self, ctx: HostContext) -> None:
        ctx.runner.stream(["git", "config", "--global", self.key, self.value])


def gvariant_strings(value: str) -> tuple[str, ...]:
    """Ways `gsettings get` may print the string `value`.

    GLib uses single quotes, switching to double quotes when the string
    contains a single quote and no double quote.
    """

    escaped = value.replace("\\", "\\\\")
    return (
        "'" + escaped.replace("'", "\\'") + "'",
        '"' + escaped.replace('"', '\\"') + '"',
    )


@dataclass
class Gsettings:
    kind: ClassVar[str] = "Gsettings"

    schema: str
    key: str
    value: str

    def describe(self) -> str:
        return f"{self.schema} {self.key} to {self.value}"

    def is_satisfied(self, ctx: HostContext) -> bool:
        r = ctx.runner.capture(["gsettings", "get", self.schema, self.key])
        if not r.ok:
            return False
        # String values come back GVariant-quoted.
        current = r.stdout.strip()
        return current == self.value or current in gvariant_strings(self.value)

    def apply(self, ctx: HostContext) -> None:
        ctx.runner.stream(["gsettings", "set", self.schema, self.key, self.value])
