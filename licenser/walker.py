# SPDX-License-Identifier: AGPL-3.0-or-later
"""Walks a source tree checking or fixing license headers."""

from __future__ import annotations

import logging
import os
from typing import List, Optional, Sequence, TextIO

from .config import DEFAULT_EXCLUDED_DIRS
from .errors import ExitCode, LicenserError, PathWalkError, VerificationMismatch
from .licensing import HeaderTemplate, contains_header, contains_header_line, rewrite_file_with_header
from .licensing.errors import LicensingError
from .paths import SEPARATORS, clean_path_prefixes, needs_exclusion

logger = logging.getLogger(__name__)

MISSING_HEADER_FORMAT = "{path}: is missing the license header\n"


def walk(
    root: str,
    ext: str,
    template: HeaderTemplate,
    exclude: Sequence[str],
    dry: bool,
    out: TextIO,
    *,
    max_line_length: Optional[int] = None,
) -> Optional[LicenserError]:
    """Visit *root* recursively and return the last per-file error, if any.

    Entries are visited depth first in lexical order. Failing to list a
    directory aborts the walk with a :class:`PathWalkError`.
    """
    errors: List[LicenserError] = []
    header = template.to_bytes()

    def visit(path: str, is_dir: bool) -> None:
        current = clean_path_prefixes(path.replace(root, "", 1), list(SEPARATORS))
        name = os.path.basename(path)
        if needs_exclusion(current, exclude) or (is_dir and name in DEFAULT_EXCLUDED_DIRS):
            logger.debug("skipping %s", path)
            return

        if not is_dir:
            err = add_or_check_license(path, ext, template, header, dry, out, max_line_length=max_line_length)
            if err is not None:
                errors.append(err)
            return

        try:
            with os.scandir(path) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as exc:
            raise PathWalkError(exc) from exc
        for entry in entries:
            visit(os.path.join(path, entry.name), entry.is_dir(follow_symlinks=False))

    try:
        visit(root, os.path.isdir(root))
    except PathWalkError as exc:
        logger.error("walking %s failed: %s", root, exc)
        return exc

    return errors[-1] if errors else None


def add_or_check_license(
    path: str,
    ext: str,
    template: HeaderTemplate,
    header: bytes,
    dry: bool,
    out: TextIO,
    *,
    max_line_length: Optional[int] = None,
) -> Optional[LicenserError]:
    if os.path.splitext(path)[1] != ext:
        return None

    try:
        with open(path, "rb") as handle:
            if contains_header(handle, template.lines, max_line_length=max_line_length):
                return None
            if logger.isEnabledFor(logging.DEBUG):
                handle.seek(0)
                if contains_header_line(handle, template.lines):
                    logger.debug("%s carries part of the %s header out of place", path, template.kind)
    except OSError as exc:
        logger.warning("cannot open %s: %s", path, exc)
        return LicenserError(exc, code=ExitCode.FAILED_TO_OPEN_WALK_FILE)

    if dry:
        report_file(out, path)
        return VerificationMismatch()

    try:
        rewrite_file_with_header(path, header)
    except LicensingError as exc:
        logger.warning("rewriting %s failed: %s", path, exc)
        return LicenserError(exc, code=ExitCode.FAILED_REWRITING_FILE)
    return None


def report_file(out: TextIO, path: str) -> None:
    logger.info("%s is missing the license header", path)
    out.write(MISSING_HEADER_FORMAT.format(path=path))
