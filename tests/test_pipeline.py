"""Tests for the execution engine."""

from pathlib import Path
from typing import List

import pytest

from wssetup.directives import Directory, GitConf
from wssetup.pipeline import INSTALL, MISSING, SKIP, DirectiveFailed, label, run_directives


class Recorder:
    """Directive double that logs probe/apply calls into a shared journal."""

    kind = "Recorder"

    def __init__(self, name: str, journal: List[str], *, satisfied=False, fail=False, probe_error=False):
        self.name = name
        self.journal = journal
        self.satisfied = satisfied
        self.fail = fail
        self.probe_error = probe_error

    def describe(self) -> str:
        return self.name

    def is_satisfied(self, ctx) -> bool:
        self.journal.append(f"probe {self.name}")
        if self.probe_error:
            raise OSError("unreadable")
        return self.satisfied

    def apply(self, ctx) -> None:
        self.journal.append(f"apply {self.name}")
        if self.fail:
            raise RuntimeError("boom")
        self.satisfied = True


def test_runs_in_manifest_order(ctx):
    journal: List[str] = []
    ds = [Recorder("a", journal), Recorder("b", journal, satisfied=True), Recorder("c", journal)]

    result = run_directives(ds, ctx)

    assert journal == ["probe a", "apply a", "probe b", "probe c", "apply c"]
    assert result.installed == ["Recorder 'a'", "Recorder 'c'"]
    assert result.skipped == ["Recorder 'b'"]


def test_fail_fast_stops_the_run(ctx):
    journal: List[str] = []
    ds = [Recorder("a", journal), Recorder("b", journal, fail=True), Recorder("c", journal)]

    with pytest.raises(DirectiveFailed) as exc:
        run_directives(ds, ctx)

    assert journal == ["probe a", "apply a", "probe b", "apply b"]
    assert exc.value.index == 1
    assert exc.value.directive is ds[1]
    assert isinstance(exc.value.cause, RuntimeError)
    assert "Recorder 'b' (#2) failed: boom" in str(exc.value)


def test_probe_error_counts_as_not_satisfied(ctx):
    journal: List[str] = []
    ds = [Recorder("a", journal, probe_error=True), Recorder("b", journal)]

    result = run_directives(ds, ctx)

    assert journal == ["probe a", "apply a", "probe b", "apply b"]
    assert len(result.installed) == 2


def test_reports_status_per_directive(ctx):
    journal: List[str] = []
    seen = []
    ds = [Recorder("a", journal, satisfied=True), Recorder("b", journal)]

    run_directives(ds, ctx, report=lambda status, d: seen.append((status, d.describe())))

    assert seen == [(SKIP, "a"), (INSTALL, "b")]


def test_check_mode_changes_nothing(ctx):
    journal: List[str] = []
    seen = []
    ds = [Recorder("a", journal, satisfied=True), Recorder("b", journal)]

    result = run_directives(ds, ctx, report=lambda status, d: seen.append(status), apply=False)

    assert journal == ["probe a", "probe b"]
    assert seen == [SKIP, MISSING]
    assert result.missing == ["Recorder 'b'"]
    assert not result.satisfied


def test_label():
    assert label(GitConf("user.name", "Ada")) == "GitConf 'user.name'"


def test_directory_and_git_conf_scenario(ctx, fake_runner, tmp_path: Path):
    target = tmp_path / "x"
    manifest = [Directory(str(target)), GitConf("user.name", "Ada")]

    first = []
    run_directives(manifest, ctx, report=lambda status, d: first.append((status, d.describe())))
    assert first == [(INSTALL, str(target)), (INSTALL, "user.name")]
    assert target.is_dir()
    assert fake_runner.git["user.name"] == "Ada"

    mutations_before = [argv for argv in fake_runner.commands() if "--get" not in argv]

    second = []
    run_directives(manifest, ctx, report=lambda status, d: second.append((status, d.describe())))
    assert second == [(SKIP, str(target)), (SKIP, "user.name")]
    assert [argv for argv in fake_runner.commands() if "--get" not in argv] == mutations_before
