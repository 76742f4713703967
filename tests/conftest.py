# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from pathlib import Path
from typing import Dict

import pytest

from licenser.licensing import DEFAULT_REGISTRY

ASL2_HEADER = DEFAULT_REGISTRY.render("ASL2", "Elasticsearch B.V.").to_bytes().decode("utf-8")

STALE_HEADER = (
    "// Copyright 2017 The elastic/go-licenser Authors. All rights reserved.\n"
    "// Use of this source code is governed by Apache License 2.0 that can\n"
    "// be found in the LICENSE file.\n"
)

GO_MOD = """module github.com/elastic/go-licenser

go 1.21

require (
\tgithub.com/hashicorp/go-multierror v1.0.0
\tgithub.com/sirkon/goproxy v1.4.8 // indirect
)

require gopkg.in/src-d/go-license-detector.v2 v2.0.1
"""

SOURCE_FILES: Dict[str, str] = {
    "cloud/wrong.go": STALE_HEADER + "\npackage cloud\n",
    "excludedpath/file.go": "package excludedpath\n",
    "multilevel/doc.go": "// Package multilevel does things\npackage multilevel\n",
    "multilevel/main.go": "package multilevel\n\nfunc main() {}\n",
    "multilevel/ok.go": ASL2_HEADER + "\npackage multilevel\n",
    "multilevel/sublevel/autogen.go": "// Code generated by hand. DO NOT EDIT.\n\npackage sublevel\n",
    "multilevel/sublevel/partial.go": STALE_HEADER + "\n" + STALE_HEADER + "\npackage sublevel\n",
    "singlelevel/main.go": "package singlelevel\n",
    "singlelevel/notes.txt": "not a source file\n",
    "vendor/dep/dep.go": "package dep\n",
}

MISSING_WITH_DEFAULT_EXCLUDES = [
    "testdata/multilevel/doc.go",
    "testdata/multilevel/main.go",
    "testdata/multilevel/sublevel/autogen.go",
    "testdata/multilevel/sublevel/partial.go",
    "testdata/singlelevel/main.go",
]


def write_tree(base: Path, files: Dict[str, str]) -> Path:
    for rel, content in files.items():
        target = base / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return base


@pytest.fixture
def source_tree(tmp_path, monkeypatch) -> Path:
    """A ``testdata`` tree in a fresh working directory."""
    monkeypatch.chdir(tmp_path)
    return write_tree(Path("testdata"), {**SOURCE_FILES, "go.mod": GO_MOD})
