# SPDX-License-Identifier: AGPL-3.0-or-later
"""Error types raised by the licensing core."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional


class LicensingError(Exception):
    ...


class HeaderTooShortError(LicensingError):
    def __init__(self, message: str = "header is too short") -> None:
        super().__init__(message)


class UnknownLicenseError(LicensingError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"unknown license: {kind}")
        self.kind = kind


class _FileError(LicensingError):
    action = "access"

    def __init__(self, path: str | Path, cause: Optional[OSError] = None) -> None:
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"failed to {self.action} {self.path}{detail}")


class FileStatError(_FileError):
    action = "stat"


class FileReadError(_FileError):
    action = "read"


class FileWriteError(_FileError):
    action = "write"


class GoModError(LicensingError):
    ...


class NoticeError(LicensingError):
    """Collects every problem found while validating notice parameters."""

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors: List[str] = list(errors)
        if len(self.errors) == 1:
            message = self.errors[0]
        else:
            points = "\n".join(f"\t* {err}" for err in self.errors)
            message = f"{len(self.errors)} errors occurred:\n{points}"
        super().__init__(message)
