# SPDX-License-Identifier: AGPL-3.0-or-later
"""Header detection, rewriting and NOTICE generation."""

from .errors import (
    FileReadError,
    FileStatError,
    FileWriteError,
    HeaderTooShortError,
    LicensingError,
    UnknownLicenseError,
)
from .headers import DEFAULT_REGISTRY, HEADERS, HeaderRegistry, HeaderTemplate
from .license import (
    contains_header,
    contains_header_line,
    header_bytes,
    rewrite_file_with_header,
    rewrite_with_header,
)

__all__ = [
    "DEFAULT_REGISTRY",
    "FileReadError",
    "FileStatError",
    "FileWriteError",
    "HEADERS",
    "HeaderRegistry",
    "HeaderTemplate",
    "HeaderTooShortError",
    "LicensingError",
    "UnknownLicenseError",
    "contains_header",
    "contains_header_line",
    "header_bytes",
    "rewrite_file_with_header",
    "rewrite_with_header",
]
