# SPDX-License-Identifier: AGPL-3.0-or-later
"""NOTICE generation for the dependencies listed in a go.mod file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, TextIO

from jinja2 import Environment, TemplateError
from pydantic import BaseModel, Field

from .detector import AnalyseFunc
from .errors import NoticeError
from .gomod import go_pkg_path, module_paths

logger = logging.getLogger(__name__)

DEFAULT_NOTICE_HEADER = """{{ project }}
Copyright {{ project_years }} {{ licensor }}

This product includes software developed at {{ licensor }} and
third-party software developed by the licenses listed below.
"""

SEPARATOR = "=" * 73
NOTICE_BODY = f"""
{SEPARATOR}

{{{{ dependency_blob }}}}
{SEPARATOR}
"""

# column layout of the dependency table
_MIN_WIDTH = 4
_PADDING = 4

_env = Environment(keep_trailing_newline=True, autoescape=False)


class Dependency(BaseModel):
    name: str
    license: str


class Notice(BaseModel):
    # Source code's owner / maintainer.
    licensor: str = ""
    project: str = ""
    # "<start>-<current>" or "<year>" for single year efforts.
    project_years: str = ""
    dependencies: List[Dependency] = Field(default_factory=list)
    # Aligned text version of dependencies, only populated when rendered.
    dependency_blob: str = ""


@dataclass
class GenerateNoticeParams:
    go_mod_file: str = ""
    licensor: str = ""
    project: str = ""
    start_year: int = 0
    # Where to render the notice; rendering is skipped when None.
    writer: Optional[TextIO] = None
    # Overrides DEFAULT_NOTICE_HEADER, only relevant when writer is set.
    notice_header: str = ""
    analyse_func: Optional[AnalyseFunc] = None

    def validate(self) -> None:
        errors = []
        if not self.go_mod_file:
            errors.append("notice: missing file path")
        if self.analyse_func is None:
            errors.append("notice: missing analyse_func")
        if not self.project:
            errors.append("notice: missing project name")
        if errors:
            raise NoticeError(errors)

    def fill_defaults(self) -> "GenerateNoticeParams":
        if not self.notice_header:
            return replace(self, notice_header=DEFAULT_NOTICE_HEADER)
        return self


def generate_notice(params: GenerateNoticeParams) -> Notice:
    """Build the notice for *params* and render it to ``params.writer`` if set."""
    params.validate()
    params = params.fill_defaults()
    notice = build_notice(params)

    paths = module_paths(params.go_mod_file)
    logger.info("analysing licenses of %d modules", len(paths))
    notice.dependencies = get_licenses(params.analyse_func, *paths)

    if params.writer is None:
        return notice

    write_template(notice, params.notice_header + NOTICE_BODY, params.writer)
    return notice


def build_notice(params: GenerateNoticeParams, *, now: Optional[datetime] = None) -> Notice:
    current_year = (now or datetime.now()).year
    years = f"{params.start_year}-{current_year}"
    if params.start_year in (0, current_year):
        years = str(current_year)
    return Notice(licensor=params.licensor, project=params.project, project_years=years)


def get_licenses(analyse_func: AnalyseFunc, *paths: str) -> List[Dependency]:
    prefix = go_pkg_path() + "/"
    dependencies: List[Dependency] = []
    for res in analyse_func(*paths):
        # strip the module cache prefix and the @<version> suffix
        name = res.arg.replace(prefix, "").partition("@")[0]

        if res.matches:
            license_id = res.matches[0].license
        else:
            # undetected licenses show the cleaned error instead
            license_id = res.err_str.replace("\n", "", 1).replace(prefix, "")

        dependencies.append(Dependency(name=name.replace("!", ""), license=license_id))

    dependencies.sort(key=lambda dep: dep.license.lower())
    return dependencies


def dependency_table(dependencies: List[Dependency]) -> str:
    if not dependencies:
        return ""
    width = max(_MIN_WIDTH, max(len(dep.name) for dep in dependencies) + _PADDING)
    return "".join(f"{dep.name.ljust(width)}{dep.license}\n" for dep in dependencies)


def write_template(notice: Notice, template_text: str, writer: TextIO) -> None:
    notice.dependency_blob = dependency_table(notice.dependencies)
    try:
        template = _env.from_string(template_text)
        writer.write(template.render(**notice.model_dump()))
    except TemplateError as exc:
        raise NoticeError([f"notice: invalid template: {exc}"]) from exc
