# SPDX-License-Identifier: AGPL-3.0-or-later
"""Writes the NOTICE file (or dumps it to the output in dry mode)."""

from __future__ import annotations

import logging
import os
from contextlib import ExitStack
from datetime import datetime

from .config import RunParams
from .errors import ExitCode, LicenserError
from .licensing.detector import analyse
from .licensing.errors import LicensingError
from .licensing.notice import GenerateNoticeParams, generate_notice

logger = logging.getLogger(__name__)


def discover_start_year(path: str) -> int:
    """Return the year of the oldest file modification below *path*."""
    start = datetime.now()
    for root, _dirs, files in os.walk(path):
        for name in files:
            file_path = os.path.join(root, name)
            if ".git" in file_path:
                continue
            modified = datetime.fromtimestamp(os.lstat(file_path).st_mtime)
            if modified < start:
                start = modified
    return start.year


def _start_year(path: str, notice_year: str) -> int:
    if not notice_year:
        return discover_start_year(path)
    try:
        return int(notice_year)
    except ValueError:
        logger.warning("ignoring invalid notice year %r", notice_year)
        return 0


def do_notice(path: str, params: RunParams) -> None:
    try:
        start_year = _start_year(path, params.notice_year)
    except OSError as exc:
        raise LicenserError(exc, code=ExitCode.GENERATE_NOTICE_FAILED) from exc

    project = params.notice_project or os.path.basename(os.path.abspath(path))
    with ExitStack() as stack:
        writer = params.out
        message = "Dumping NOTICE to output...\n\n"
        if not params.dry:
            notice_path = os.path.join(path, params.notice_file)
            try:
                writer = stack.enter_context(open(notice_path, "w", encoding="utf-8"))
            except OSError as exc:
                raise LicenserError(exc, code=ExitCode.OPEN_FILE_FAILED) from exc
            message = "Generating NOTICE file...\n\n"
        params.out.write(message)

        try:
            generate_notice(
                GenerateNoticeParams(
                    go_mod_file=os.path.join(path, "go.mod"),
                    writer=writer,
                    project=project,
                    licensor=params.licensor,
                    start_year=start_year,
                    notice_header=params.notice_header,
                    analyse_func=params.analyse_func or analyse,
                )
            )
        except (LicensingError, OSError) as exc:
            logger.error("notice generation failed: %s", exc)
            raise LicenserError(exc, code=ExitCode.GENERATE_NOTICE_FAILED) from exc
