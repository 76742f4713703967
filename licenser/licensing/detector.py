# SPDX-License-Identifier: AGPL-3.0-or-later
"""License classification for dependency directories.

Canonical license files at the root of each directory are matched against
anchor phrases; every phrase of an entry has to be present for a match.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Dict, List, Tuple

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

MAX_LICENSE_BYTES = 128 * 1024
NO_LICENSE_FOUND = "no license file was found"

LICENSE_FILES = (
    "LICENSE",
    "LICENSE.txt",
    "LICENSE.md",
    "LICENSE.rst",
    "LICENSE-MIT",
    "LICENSE-APACHE",
    "LICENCE",
    "LICENCE.txt",
    "LICENCE.md",
    "COPYING",
    "COPYING.txt",
    "COPYING.md",
    "UNLICENSE",
)

# Ordered from the most to the least specific so that the first hit wins
# between licenses sharing phrases.
ANCHOR_PHRASES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Apache-2.0", ("apache license", "version 2.0")),
    ("MPL-2.0", ("mozilla public license version 2.0",)),
    ("AGPL-3.0", ("gnu affero general public license", "version 3")),
    ("LGPL-3.0", ("gnu lesser general public license", "version 3")),
    ("LGPL-2.1", ("gnu lesser general public license", "version 2.1")),
    ("GPL-3.0", ("gnu general public license", "version 3")),
    ("GPL-2.0", ("gnu general public license", "version 2")),
    ("EPL-2.0", ("eclipse public license", "2.0")),
    (
        "BSD-4-Clause",
        (
            "redistribution and use in source and binary forms",
            "all advertising materials mentioning features or use of this software",
        ),
    ),
    ("BSD-3-Clause", ("redistribution and use in source and binary forms", "neither the name of")),
    ("BSD-2-Clause", ("redistribution and use in source and binary forms",)),
    ("BSL-1.0", ("boost software license",)),
    ("ISC", ("permission to use, copy, modify, and/or distribute this software for any purpose",)),
    ("MIT", ("permission is hereby granted, free of charge",)),
    ("Unlicense", ("this is free and unencumbered software released into the public domain",)),
    ("CC0-1.0", ("cc0 1.0 universal",)),
)

_WS = re.compile(r"\s+")


class Match(BaseModel):
    license: str
    file: str | None = None


class AnalysisResult(BaseModel):
    arg: str
    matches: List[Match] = Field(default_factory=list)
    err_str: str = ""


AnalyseFunc = Callable[..., List[AnalysisResult]]


def _normalize(text: str) -> str:
    return _WS.sub(" ", text.lower()).replace("“", '"').replace("”", '"')


def classify_text(text: str) -> List[Match]:
    """Return the licenses whose anchor phrases all appear in *text*."""
    normalized = _normalize(text)
    return [
        Match(license=license_id)
        for license_id, phrases in ANCHOR_PHRASES
        if all(phrase in normalized for phrase in phrases)
    ]


def _read_head(path: Path) -> str:
    with path.open("rb") as handle:
        return handle.read(MAX_LICENSE_BYTES).decode("utf-8", errors="replace")


def analyse_dir(arg: str) -> AnalysisResult:
    root = Path(arg)
    try:
        names = {entry.name: entry for entry in root.iterdir() if entry.is_file()}
    except OSError as exc:
        logger.debug("cannot list %s: %s", arg, exc)
        return AnalysisResult(arg=arg, err_str=f"{arg}: {exc.strerror or exc}\n")

    seen: Dict[str, Match] = {}
    for candidate in LICENSE_FILES:
        path = names.get(candidate)
        if path is None:
            continue
        try:
            text = _read_head(path)
        except OSError as exc:
            logger.warning("cannot read %s: %s", path, exc)
            continue
        for match in classify_text(text):
            seen.setdefault(match.license, match.model_copy(update={"file": candidate}))

    if not seen:
        return AnalysisResult(arg=arg, err_str=f"{NO_LICENSE_FOUND}\n")
    return AnalysisResult(arg=arg, matches=list(seen.values()))


def analyse(*args: str) -> List[AnalysisResult]:
    """Classify the license of each directory in *args*, keeping their order."""
    return [analyse_dir(arg) for arg in args]
