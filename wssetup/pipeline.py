from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .directives import Directive, HostContext

logger = logging.getLogger(__name__)


SKIP = "skip"
INSTALL = "install"
MISSING = "missing"

Reporter = Callable[[str, Directive], None]


def label(directive: Directive) -> str:
    return f"{directive.kind} '{directive.describe()}'"


class DirectiveFailed(RuntimeError):
    def __init__(self, index: int, directive: Directive, cause: BaseException) -> None:
        super().__init__(f"{label(directive)} (#{index + 1}) failed: {cause}")
        self.index = index
        self.directive = directive
        self.cause = cause


@dataclass(frozen=True)
class RunResult:
    installed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    # Only filled when apply is disabled.
    missing: List[str] = field(default_factory=list)

    @property
    def satisfied(self) -> bool:
        return not self.missing


def probe(directive: Directive, ctx: HostContext) -> bool:
    """Run the satisfaction probe; a probe that blows up counts as unsatisfied."""

    try:
        return bool(directive.is_satisfied(ctx))
    except Exception as e:
        logger.warning("Probe for %s failed, treating as not installed: %s", label(directive), e)
        return False


def run_directives(
    directives: Sequence[Directive],
    ctx: HostContext,
    *,
    report: Optional[Reporter] = None,
    apply: bool = True,
) -> RunResult:
    """Bring each directive to its desired state, in order.

    The first failing apply stops the run; later directives are neither
    probed nor applied. With `apply=False` nothing is changed and unsatisfied
    directives are reported as missing.
    """

    result = RunResult()

    for index, directive in enumerate(directives):
        if probe(directive, ctx):
            logger.info("Skipping %s (already installed)", label(directive))
            if report:
                report(SKIP, directive)
            result.skipped.append(label(directive))
            continue

        if not apply:
            logger.info("Missing %s", label(directive))
            if report:
                report(MISSING, directive)
            result.missing.append(label(directive))
            continue

        logger.info("Installing %s", label(directive))
        if report:
            report(INSTALL, directive)
        try:
            directive.apply(ctx)
        except Exception as e:
            logger.exception("Install of %s failed", label(directive))
            raise DirectiveFailed(index, directive, e) from e
        result.installed.append(label(directive))

    return result
