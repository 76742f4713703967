# SPDX-License-Identifier: AGPL-3.0-or-later
"""Minimal ``go.mod`` reader and Go module cache path helpers."""

from __future__ import annotations

import os
import re
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .errors import GoModError

_UPPER_RUN = re.compile(r"[A-Z]+")


@dataclass
class GoModule:
    module: Optional[str] = None
    go: Optional[str] = None
    require: Dict[str, str] = field(default_factory=dict)


def go_pkg_path() -> str:
    """Return the local Go module cache directory."""
    cache = os.environ.get("GOMODCACHE")
    if cache:
        return cache
    gopath = os.environ.get("GOPATH", "").split(os.pathsep)[0]
    if not gopath:
        gopath = str(Path.home() / "go")
    return os.path.join(gopath, "pkg", "mod")


def escape_module_path(path: str) -> str:
    """Escape uppercase letters the way the module cache stores them (``A`` -> ``!a``)."""
    return _UPPER_RUN.sub(lambda m: "".join(f"!{c.lower()}" for c in m.group(0)), path)


def _strip_comment(line: str) -> str:
    idx = line.find("//")
    if idx >= 0:
        line = line[:idx]
    return line.strip()


def _split_fields(text: str, filename: str, lineno: int) -> List[str]:
    try:
        lexer = shlex.shlex(text, posix=True)
        lexer.whitespace_split = True
        lexer.commenters = ""
        lexer.quotes = '"`'
        return list(lexer)
    except ValueError as exc:
        raise GoModError(f"{filename}:{lineno}: {exc}") from exc


def parse_go_mod(filename: str, contents: str) -> GoModule:
    """Parse the ``module``, ``go`` and ``require`` directives of a go.mod file.

    Other directives (``replace``, ``exclude``, ``retract``...) are skipped.
    """
    module = GoModule()
    block: Optional[str] = None
    for lineno, raw in enumerate(contents.splitlines(), start=1):
        line = _strip_comment(raw)
        if not line:
            continue

        if block is not None:
            if line == ")":
                block = None
                continue
            if block == "require":
                _add_require(module, _split_fields(line, filename, lineno), filename, lineno)
            continue

        fields = _split_fields(line, filename, lineno)
        verb, args = fields[0], fields[1:]
        if args == ["("]:
            block = verb
            continue
        if verb == "module":
            if len(args) != 1:
                raise GoModError(f"{filename}:{lineno}: usage: module module/path")
            module.module = args[0]
        elif verb == "go":
            if len(args) != 1:
                raise GoModError(f"{filename}:{lineno}: usage: go 1.23")
            module.go = args[0]
        elif verb == "require":
            _add_require(module, args, filename, lineno)

    if block is not None:
        raise GoModError(f"{filename}: unterminated {block} block")
    return module


def _add_require(module: GoModule, args: List[str], filename: str, lineno: int) -> None:
    if len(args) != 2:
        raise GoModError(f"{filename}:{lineno}: usage: require module/path v1.2.3")
    path, version = args
    if not version.startswith("v"):
        raise GoModError(f"{filename}:{lineno}: invalid version {version!r} for {path}")
    module.require[path] = version


def module_paths(go_mod_file: str | os.PathLike[str]) -> List[str]:
    """Return the sorted module cache directories of every requirement."""
    path = Path(go_mod_file)
    contents = path.read_text(encoding="utf-8")
    module = parse_go_mod(str(path), contents)
    if not module.require:
        raise GoModError("modfile has no dependencies to generate notice")

    base = go_pkg_path()
    paths = [
        os.path.join(base, *escape_module_path(dep).split("/")) + f"@{version}"
        for dep, version in module.require.items()
    ]
    return sorted(paths)
