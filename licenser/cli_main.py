# SPDX-License-Identifier: AGPL-3.0-or-later
"""Command line entrypoint."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_PATH, RunParams, Settings
from .errors import ExitCode, LicenserError, exit_code
from .licensing import DEFAULT_REGISTRY, HeaderRegistry, UnknownLicenseError
from .logging_setup import setup_logging
from .notice_cmd import do_notice
from .walker import walk

logger = logging.getLogger(__name__)

DIST_NAME = "licenser"

DESCRIPTION = """
licenser walks the specified path recursively and prepends a license header
when the current header doesn't match the one found in the file.

Using the --notice flag a list of the project's dependencies and licenses is
compiled after the "go.mod" file is inspected. If the dependencies aren't
found locally, their license is reported as not found.
"""


def _installed_version() -> str:
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        return "dev"


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="licenser",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("path", nargs="?", default=DEFAULT_PATH)
    parser.add_argument(
        "--exclude",
        action="append",
        default=list(settings.exclude),
        help="path to exclude (can be specified multiple times).",
    )
    parser.add_argument(
        "-d",
        dest="dry",
        action="store_true",
        help="skips rewriting files and returns exitcode 1 if any discrepancies are found.",
    )
    parser.add_argument("--version", action="store_true", help="prints out the version.")
    parser.add_argument(
        "--notice",
        action="store_true",
        help="generates a NOTICE (use --notice-file to change it) file on the folder where it's being run.",
    )
    parser.add_argument(
        "--notice-year", default="", help="specifies the start of the project so the notice file reflects it."
    )
    parser.add_argument(
        "--notice-file", default=settings.notice_file, help="specifies the file where to write the license notice."
    )
    parser.add_argument("--notice-header", default="", help="specifies the notice header Jinja2 template.")
    parser.add_argument(
        "--notice-project-name",
        dest="notice_project",
        default="",
        help="specifies the notice project name at the top of the template (defaults to folder name).",
    )
    parser.add_argument("--ext", default=settings.ext, help="sets the file extension to scan for.")
    parser.add_argument(
        "--license",
        default=settings.license,
        help=f"sets the license type to check: {', '.join(DEFAULT_REGISTRY.kinds())}",
    )
    parser.add_argument("--licensor", default=settings.licensor, help="sets the name of the licensor")
    parser.add_argument("--log-file", default=str(settings.log_file), help="where to write the run log.")
    parser.add_argument("-v", "--verbose", action="store_true", help="also log to stderr.")
    return parser


def params_from_args(args: argparse.Namespace) -> RunParams:
    return RunParams(
        args=[args.path],
        license=args.license,
        licensor=args.licensor,
        exclude=list(args.exclude or []),
        ext=args.ext,
        dry=args.dry,
        notice=args.notice,
        notice_year=args.notice_year,
        notice_file=args.notice_file,
        notice_header=args.notice_header,
        notice_project=args.notice_project,
        out=sys.stdout,
    )


def run(params: RunParams, registry: HeaderRegistry = DEFAULT_REGISTRY) -> Optional[LicenserError]:
    """Check or fix every matching file, then write the notice if requested.

    Returns the error to report, or None when everything went fine.
    """
    try:
        template = registry.render(params.license, params.licensor)
    except UnknownLicenseError as exc:
        return LicenserError(exc, code=ExitCode.UNKNOWN_LICENSE)

    path = params.args[0] if params.args else DEFAULT_PATH
    try:
        os.stat(path)
    except OSError as exc:
        return LicenserError(exc, code=ExitCode.FAILED_TO_STAT_TREE)

    logger.info("checking %s for %s headers (dry=%s)", path, template.kind, params.dry)
    walk_err = walk(
        path,
        params.ext,
        template,
        params.exclude,
        params.dry,
        params.out,
        max_line_length=registry.max_line_length,
    )

    if not params.notice:
        return walk_err

    try:
        do_notice(path, params)
    except LicenserError as exc:
        return exc

    return walk_err


def main(argv: Optional[List[str]] = None) -> int:
    settings = Settings()
    args = build_parser(settings).parse_args(argv)

    if args.version:
        print(f"licenser {_installed_version()}")
        return 0

    setup_logging(Path(args.log_file).expanduser(), settings.log_level, verbose=args.verbose)

    err = run(params_from_args(args))
    if err is not None and str(err):
        sys.stderr.write(f"{err}\n")
    return exit_code(err)
