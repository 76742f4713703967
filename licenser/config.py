# SPDX-License-Identifier: AGPL-3.0-or-later
"""Settings shared by the command line front end."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, TextIO

from platformdirs import PlatformDirs
from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_EXT = ".go"
DEFAULT_PATH = "."
DEFAULT_LICENSE = "ASL2"
DEFAULT_LICENSOR = "Elasticsearch B.V."
DEFAULT_NOTICE_FILE = "NOTICE"
DEFAULT_EXCLUDED_DIRS = ("vendor", ".git")

_platform_dirs = PlatformDirs(appname="licenser", appauthor=False)


def default_log_file() -> Path:
    return Path(_platform_dirs.user_log_dir) / "licenser.log"


class Settings(BaseSettings):
    license: str = DEFAULT_LICENSE
    licensor: str = DEFAULT_LICENSOR
    ext: str = DEFAULT_EXT
    exclude: List[str] = Field(default_factory=list)
    notice_file: str = DEFAULT_NOTICE_FILE
    log_file: Path = Field(default_factory=default_log_file)
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "LICENSER_",
        "env_file": ".env",
        "extra": "ignore",
    }


@dataclass
class RunParams:
    """Everything a single run needs, resolved from flags and settings."""

    args: List[str] = field(default_factory=list)
    license: str = DEFAULT_LICENSE
    licensor: str = DEFAULT_LICENSOR
    exclude: List[str] = field(default_factory=list)
    ext: str = DEFAULT_EXT
    dry: bool = False
    notice: bool = False
    notice_year: str = ""
    notice_file: str = DEFAULT_NOTICE_FILE
    notice_header: str = ""
    notice_project: str = ""
    out: TextIO = field(default_factory=lambda: sys.stdout)
    analyse_func: Optional[Callable[..., list]] = None
