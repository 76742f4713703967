# SPDX-License-Identifier: AGPL-3.0-or-later
"""Path exclusion helpers used while walking the source tree."""

from __future__ import annotations

import os
from typing import Iterable, Sequence

SEPARATORS = tuple(dict.fromkeys(("/", os.sep)))
EXCLUDE_SUFFIXES = ("*",) + SEPARATORS


def needs_exclusion(path: str, exclude: Iterable[str]) -> bool:
    """Return True when *path* is covered by any of the *exclude* patterns.

    Patterns are cleaned of trailing separators and ``*`` before being
    compared, so ``a/b``, ``a/b/`` and ``a/b/*`` all exclude ``a/b/c``.
    """
    for pattern in exclude:
        excluded = clean_path_suffixes(pattern, EXCLUDE_SUFFIXES)
        if not excluded:
            continue
        # literal prefix: covers the exact path and everything below it
        if path.startswith(excluded):
            return True
    return False


def clean_path_suffixes(path: str, suffixes: Sequence[str] | None) -> str:
    """Strip any of *suffixes* from the end of *path* until none is left."""
    suffixes = [suffix for suffix in (suffixes or ()) if suffix]
    stripped = True
    while path and stripped:
        stripped = False
        for suffix in suffixes:
            if path.endswith(suffix):
                path = path[: -len(suffix)]
                stripped = True
    return path


def clean_path_prefixes(path: str, prefixes: Sequence[str] | None) -> str:
    """Strip the first matching prefix of *prefixes* from *path*."""
    for prefix in prefixes or ():
        if prefix and path.startswith(prefix):
            return path[len(prefix):]
    return path
