# SPDX-License-Identifier: AGPL-3.0-or-later
"""Process level errors and their exit codes."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    DEFAULT = 0
    SOURCE_NEEDS_TO_BE_REWRITTEN = 1
    FAILED_TO_STAT_TREE = 2
    FAILED_TO_STAT_FILE = 3
    FAILED_TO_WALK_PATH = 4
    FAILED_TO_OPEN_WALK_FILE = 5
    FAILED_REWRITING_FILE = 6
    UNKNOWN_LICENSE = 7
    OPEN_FILE_FAILED = 8
    GENERATE_NOTICE_FAILED = 9


UNKNOWN_ERROR_CODE = 255


class LicenserError(Exception):
    """Wraps an underlying error together with the exit code it maps to."""

    def __init__(self, err: Optional[BaseException] = None, code: int = UNKNOWN_ERROR_CODE) -> None:
        super().__init__(err)
        self.err = err
        self.code = int(code)

    def __str__(self) -> str:
        if self.err is None:
            return ""
        return str(self.err)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(err={self.err!r}, code={self.code})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LicenserError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.code == other.code
            and repr(self.err) == repr(other.err)
        )

    __hash__ = Exception.__hash__


class VerificationMismatch(LicenserError):
    """At least one file is missing the header in verification-only mode."""

    def __init__(self) -> None:
        super().__init__(code=ExitCode.SOURCE_NEEDS_TO_BE_REWRITTEN)


class PathWalkError(LicenserError):
    def __init__(self, err: BaseException) -> None:
        super().__init__(err, code=ExitCode.FAILED_TO_WALK_PATH)


def exit_code(err: Optional[BaseException]) -> int:
    """Map *err* to the process exit code."""
    if err is None:
        return ExitCode.DEFAULT
    if isinstance(err, LicenserError):
        return err.code
    return UNKNOWN_ERROR_CODE
