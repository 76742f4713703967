# SPDX-License-Identifier: AGPL-3.0-or-later
from __future__ import annotations

import io
import logging
import os

from conftest import ASL2_HEADER, MISSING_WITH_DEFAULT_EXCLUDES, SOURCE_FILES

import licenser.walker as walker
from licenser.errors import ExitCode, LicenserError, PathWalkError, VerificationMismatch
from licenser.licensing import DEFAULT_REGISTRY, FileWriteError

TEMPLATE = DEFAULT_REGISTRY.render("ASL2", "Elasticsearch B.V.")


def _lines(out: io.StringIO) -> list[str]:
    return out.getvalue().splitlines()


def _missing(paths):
    return [f"{os.path.normpath(p)}: is missing the license header" for p in paths]


def test_walk_dry_reports_missing_headers(source_tree):
    out = io.StringIO()
    err = walker.walk("testdata", ".go", TEMPLATE, ["excludedpath", "cloud"], True, out)

    assert err == VerificationMismatch()
    assert _lines(out) == _missing(MISSING_WITH_DEFAULT_EXCLUDES)


def test_walk_dry_without_excludes_still_skips_vendor(source_tree):
    out = io.StringIO()
    walker.walk("testdata", ".go", TEMPLATE, [], True, out)

    expected = ["testdata/cloud/wrong.go", "testdata/excludedpath/file.go"] + MISSING_WITH_DEFAULT_EXCLUDES
    assert _lines(out) == _missing(expected)
    assert "vendor" not in out.getvalue()


def test_walk_exclude_with_wildcard_and_nested_path(source_tree):
    out = io.StringIO()
    walker.walk(
        "testdata",
        ".go",
        TEMPLATE,
        ["cloud/*", "excludedpath/", "multilevel/sublevel"],
        True,
        out,
    )
    assert _lines(out) == _missing(
        ["testdata/multilevel/doc.go", "testdata/multilevel/main.go", "testdata/singlelevel/main.go"]
    )


def test_walk_rewrites_files(source_tree):
    out = io.StringIO()
    err = walker.walk("testdata", ".go", TEMPLATE, ["excludedpath", "cloud"], False, out)

    assert err is None
    assert out.getvalue() == ""
    assert (source_tree / "multilevel/ok.go").read_text() == SOURCE_FILES["multilevel/ok.go"]
    assert (source_tree / "multilevel/doc.go").read_text() == ASL2_HEADER + "\n" + SOURCE_FILES["multilevel/doc.go"]
    assert (source_tree / "multilevel/sublevel/partial.go").read_text() == ASL2_HEADER + "\npackage sublevel\n"
    # excluded and ignored files are untouched
    assert (source_tree / "cloud/wrong.go").read_text() == SOURCE_FILES["cloud/wrong.go"]
    assert (source_tree / "vendor/dep/dep.go").read_text() == SOURCE_FILES["vendor/dep/dep.go"]
    assert (source_tree / "singlelevel/notes.txt").read_text() == SOURCE_FILES["singlelevel/notes.txt"]

    second = io.StringIO()
    assert walker.walk("testdata", ".go", TEMPLATE, ["excludedpath", "cloud"], True, second) is None
    assert second.getvalue() == ""


def test_walk_other_extension(source_tree):
    out = io.StringIO()
    walker.walk("testdata", ".txt", TEMPLATE, [], True, out)
    assert _lines(out) == _missing(["testdata/singlelevel/notes.txt"])


def test_walk_listing_failure_aborts(source_tree, monkeypatch):
    real_scandir = os.scandir

    def fake_scandir(path):
        if str(path).endswith("multilevel"):
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(walker.os, "scandir", fake_scandir)
    out = io.StringIO()
    err = walker.walk("testdata", ".go", TEMPLATE, ["excludedpath", "cloud"], True, out)

    assert isinstance(err, PathWalkError)
    assert err.code == ExitCode.FAILED_TO_WALK_PATH
    assert "singlelevel" not in out.getvalue()


def test_add_or_check_license_open_failure(source_tree, monkeypatch):
    def fake_open(*args, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(walker, "open", fake_open, raising=False)
    err = walker.add_or_check_license(
        "testdata/singlelevel/main.go", ".go", TEMPLATE, TEMPLATE.to_bytes(), False, io.StringIO()
    )
    assert isinstance(err, LicenserError)
    assert err.code == ExitCode.FAILED_TO_OPEN_WALK_FILE


def test_add_or_check_license_rewrite_failure(source_tree, monkeypatch):
    def fake_rewrite(path, header):
        raise FileWriteError(path, OSError("disk full"))

    monkeypatch.setattr(walker, "rewrite_file_with_header", fake_rewrite)
    err = walker.add_or_check_license(
        "testdata/singlelevel/main.go", ".go", TEMPLATE, TEMPLATE.to_bytes(), False, io.StringIO()
    )
    assert err.code == ExitCode.FAILED_REWRITING_FILE
    assert isinstance(err.err, FileWriteError)
    assert "disk full" in str(err)


def test_add_or_check_license_skips_other_extensions(source_tree):
    out = io.StringIO()
    assert walker.add_or_check_license("testdata/go.mod", ".go", TEMPLATE, TEMPLATE.to_bytes(), True, out) is None
    assert out.getvalue() == ""


def _count_line_scans(monkeypatch):
    calls = []
    real = walker.contains_header_line

    def counting(reader, header_lines):
        calls.append(header_lines)
        return real(reader, header_lines)

    monkeypatch.setattr(walker, "contains_header_line", counting)
    return calls


def test_add_or_check_license_skips_line_scan_without_debug(source_tree, monkeypatch, caplog):
    caplog.set_level(logging.INFO, logger="licenser.walker")
    calls = _count_line_scans(monkeypatch)

    err = walker.add_or_check_license(
        "testdata/cloud/wrong.go", ".go", TEMPLATE, TEMPLATE.to_bytes(), True, io.StringIO()
    )

    assert err == VerificationMismatch()
    assert calls == []


def test_add_or_check_license_logs_out_of_place_header_lines(source_tree, monkeypatch, caplog):
    caplog.set_level(logging.DEBUG, logger="licenser.walker")
    calls = _count_line_scans(monkeypatch)
    misplaced = "package main\n\n" + ASL2_HEADER
    (source_tree / "singlelevel/main.go").write_text(misplaced, encoding="utf-8")

    walker.add_or_check_license(
        "testdata/singlelevel/main.go", ".go", TEMPLATE, TEMPLATE.to_bytes(), True, io.StringIO()
    )

    assert len(calls) == 1
    assert "carries part of the ASL2 header out of place" in caplog.text
