"""Manifest interpreter.

A manifest is an ordered list of directive calls. Two spellings are accepted:

Call style (parsed, never executed)::

    apt("git")
    snap("code", "classic")
    git_conf("user.name", "Ada")
    bin("https://example.com/tool.tar.gz", name="tool")

YAML::

    - apt: git
    - snap: [code, classic]
    - git_conf: {key: user.name, value: Ada}

Both go through `ManifestBuilder`, which has one method per directive.
"""

from __future__ import annotations

import ast
import inspect
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .directives import (
    AptPackage,
    BashRC,
    Bin,
    Command,
    Directive,
    Directory,
    GitConf,
    Gsettings,
    NewGroup,
    NewGroupMember,
    Script,
    SnapPackage,
)

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class ManifestError(ValueError):
    def __init__(self, message: str, *, filename: str = "<manifest>", lineno: Optional[int] = None) -> None:
        where = f"{filename}:{lineno}" if lineno is not None else filename
        super().__init__(f"{where}: {message}")
        self.filename = filename
        self.lineno = lineno


class ManifestBuilder:
    """Collects directives in call order."""

    def __init__(self) -> None:
        self.directives: List[Directive] = []

    def snap(self, package_name: str, *flags: str) -> None:
        self.directives.append(SnapPackage(package_name, tuple(flags)))

    def apt(self, source: str) -> None:
        self.directives.append(AptPackage(source))

    def mkdir(self, path: str) -> None:
        self.directives.append(Directory(path))

    def script(self, source: str) -> None:
        self.directives.append(Script(source))

    def new_group(self, name: str, *flags: str) -> None:
        self.directives.append(NewGroup(name, tuple(flags)))

    def new_group_member(self, user: str, group: str) -> None:
        self.directives.append(NewGroupMember(user, group))

    def git_conf(self, key: str, value: str) -> None:
        self.directives.append(GitConf(key, value))

    def bashrc(self, code: str) -> None:
        self.directives.append(BashRC(code))

    def bin(self, source: str, name: Optional[str] = None) -> None:
        self.directives.append(Bin(source, name))

    def gsettings(self, schema: str, key: str, value: str) -> None:
        self.directives.append(Gsettings(schema, key, value))

    def command(self, cmd: str) -> None:
        self.directives.append(Command(cmd))


DIRECTIVE_NAMES = frozenset(
    name
    for name, member in inspect.getmembers(ManifestBuilder, inspect.isfunction)
    if not name.startswith("_")
)


def _invoke(
    builder: ManifestBuilder,
    name: str,
    args: Sequence[Any],
    kwargs: Dict[str, Any],
    *,
    filename: str,
    lineno: Optional[int],
) -> None:
    if name not in DIRECTIVE_NAMES:
        raise ManifestError(f"unknown directive {name!r}", filename=filename, lineno=lineno)

    method = getattr(builder, name)
    try:
        inspect.signature(method).bind(*args, **kwargs)
    except TypeError as e:
        raise ManifestError(f"{name}(): {e}", filename=filename, lineno=lineno) from e

    for value in [*args, *kwargs.values()]:
        if value is not None and not isinstance(value, str):
            raise ManifestError(
                f"{name}(): arguments must be strings, got {value!r}", filename=filename, lineno=lineno
            )

    method(*args, **kwargs)


def parse_manifest(text: str, *, filename: str = "<manifest>") -> List[Directive]:
    """Parse call-style manifest text into directives, in order."""

    try:
        tree = ast.parse(text, filename=filename)
    except SyntaxError as e:
        raise ManifestError(f"syntax error: {e.msg}", filename=filename, lineno=e.lineno) from e

    builder = ManifestBuilder()
    calls: List[tuple] = []

    # Validate the whole file before building anything.
    for stmt in tree.body:
        lineno = stmt.lineno
        if not (isinstance(stmt, ast.Expr) and isinstance(stmt.value, ast.Call)):
            raise ManifestError("only directive calls are allowed", filename=filename, lineno=lineno)
        call = stmt.value
        if not isinstance(call.func, ast.Name):
            raise ManifestError("directive must be a plain name", filename=filename, lineno=lineno)
        name = call.func.id
        if name not in DIRECTIVE_NAMES:
            raise ManifestError(f"unknown directive {name!r}", filename=filename, lineno=lineno)
        try:
            args = [ast.literal_eval(a) for a in call.args]
            kwargs = {}
            for kw in call.keywords:
                if kw.arg is None:
                    raise ValueError("**kwargs")
                kwargs[kw.arg] = ast.literal_eval(kw.value)
        except (ValueError, TypeError, SyntaxError) as e:
            raise ManifestError(
                f"{name}(): arguments must be literals", filename=filename, lineno=lineno
            ) from e
        calls.append((name, args, kwargs, lineno))

    for name, args, kwargs, lineno in calls:
        _invoke(builder, name, args, kwargs, filename=filename, lineno=lineno)

    return builder.directives


def parse_yaml_manifest(text: str, *, filename: str = "<manifest>") -> List[Directive]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        raise ManifestError(
            f"invalid YAML: {e}", filename=filename, lineno=(mark.line + 1) if mark else None
        ) from e

    if data is None:
        return []
    if not isinstance(data, list):
        raise ManifestError("YAML manifest must be a list of directives", filename=filename)

    builder = ManifestBuilder()
    calls: List[tuple] = []
    for i, item in enumerate(data, start=1):
        if not (isinstance(item, dict) and len(item) == 1):
            raise ManifestError(f"entry {i} must be a single-key mapping", filename=filename)
        (name, params), = item.items()
        if isinstance(params, dict):
            args, kwargs = [], dict(params)
        elif isinstance(params, list):
            args, kwargs = list(params), {}
        else:
            args, kwargs = [params], {}
        if str(name) not in DIRECTIVE_NAMES:
            raise ManifestError(f"entry {i}: unknown directive {name!r}", filename=filename)
        calls.append((str(name), args, kwargs))

    for name, args, kwargs in calls:
        _invoke(builder, name, args, kwargs, filename=filename, lineno=None)

    return builder.directives


def load_manifest(path: str) -> List[Directive]:
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in YAML_SUFFIXES:
        directives = parse_yaml_manifest(text, filename=str(p))
    else:
        directives = parse_manifest(text, filename=str(p))
    logger.info("Loaded %d directives from %s", len(directives), str(p))
    return directives
