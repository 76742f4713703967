# SPDX-License-Identifier: AGPL-3.0-or-later
"""Header detection and in-place header rewriting."""

from __future__ import annotations

import io
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional, Sequence

from .errors import FileReadError, FileStatError, FileWriteError, HeaderTooShortError

logger = logging.getLogger(__name__)

START_PREFIXES = (
    b"// Copyright",
    b"// copyright",
    b"// Licensed",
    b"// licensed",
    b"// ELASTICSEARCH CONFIDENTIAL",
)
END_PREFIXES = (
    b"package ",
    b"// Package ",
    b"// +build ",
    b"// Code generated",
    b"// code generated",
    b"//go:",
)


def _strip_eol(line: bytes) -> bytes:
    if line.endswith(b"\n"):
        line = line[:-1]
    if line.endswith(b"\r"):
        line = line[:-1]
    return line


def contains_header(
    reader: BinaryIO,
    header_lines: Sequence[str],
    *,
    max_line_length: Optional[int] = None,
) -> bool:
    """Compare the first ``len(header_lines)`` lines of *reader* with the header.

    Lines are compared one by one without loading the whole file. A line
    longer than *max_line_length* bytes stops the scan and counts as a
    mismatch.
    """
    limit = max_line_length + 1 if max_line_length else -1
    for expected in header_lines:
        raw = reader.readline(limit)
        if not raw:
            # file is shorter than license
            return False
        line = _strip_eol(raw)
        if max_line_length and len(line) > max_line_length:
            return False
        if line != expected.encode("utf-8"):
            return False
    return True


def contains_header_line(reader: BinaryIO, header_lines: Sequence[str]) -> bool:
    """Return True when any line of *reader* equals any of *header_lines*."""
    wanted = {line.encode("utf-8") for line in header_lines}
    for raw in reader:
        if _strip_eol(raw) in wanted:
            return True
    return False


def header_bytes(reader: BinaryIO) -> bytes:
    """Return what is considered to be the header of *reader*'s contents.

    Everything from the first copyright-like line up to (not including) the
    first package, build constraint or generated-code line is part of the
    header, blank lines and repeated notices included. Lines keep their
    original endings so the result can be located in the source verbatim.
    """
    replaceable = bytearray()
    continued = False
    for raw in reader:
        if raw.startswith(END_PREFIXES):
            break
        if raw.startswith(START_PREFIXES):
            continued = True
        if continued:
            replaceable += raw
    return bytes(replaceable)


def rewrite_with_header(src: bytes, header: bytes) -> bytes:
    """Replace the header found in *src* with *header*."""
    if len(header) < 2:
        raise HeaderTooShortError()

    # the header is always followed by a blank line
    while not header.endswith(b"\n\n"):
        header += b"\n"

    old_header = header_bytes(io.BytesIO(src))
    logger.debug("replacing %d header bytes with %d", len(old_header), len(header))
    return src.replace(old_header, header, 1)


def rewrite_file_with_header(path: str | os.PathLike[str], header: bytes) -> None:
    """Rewrite the file at *path* with *header*, keeping its permission bits.

    Symlinks are resolved first, so the file they point to is rewritten and
    the link is kept.
    """
    if len(header) < 2:
        raise HeaderTooShortError()

    target = Path(os.path.realpath(path))
    try:
        info = target.stat()
    except OSError as exc:
        raise FileStatError(target, exc) from exc

    try:
        origin = target.read_bytes()
    except OSError as exc:
        raise FileReadError(target, exc) from exc

    data = rewrite_with_header(origin, header)
    _atomic_write(target, data, stat.S_IMODE(info.st_mode))
    logger.info("rewrote header of %s", target)


def _atomic_write(target: Path, data: bytes, mode: int) -> None:
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise FileWriteError(target, exc) from exc
