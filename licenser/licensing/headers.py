# SPDX-License-Identifier: AGPL-3.0-or-later
"""Supported license header templates.

Templates are plain line lists. A line may carry the ``{licensor}``
placeholder, which is replaced with the licensor name when the template is
rendered for a run.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Sequence, Tuple

from .errors import UnknownLicenseError

LICENSOR_PLACEHOLDER = "{licensor}"

HEADERS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "ASL2": (
            "// Licensed to {licensor} under one or more contributor",
            "// license agreements. See the NOTICE file distributed with",
            "// this work for additional information regarding copyright",
            "// ownership. {licensor} licenses this file to you under",
            '// the Apache License, Version 2.0 (the "License"); you may',
            "// not use this file except in compliance with the License.",
            "// You may obtain a copy of the License at",
            "//",
            "//     http://www.apache.org/licenses/LICENSE-2.0",
            "//",
            "// Unless required by applicable law or agreed to in writing,",
            "// software distributed under the License is distributed on an",
            '// "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY',
            "// KIND, either express or implied.  See the License for the",
            "// specific language governing permissions and limitations",
            "// under the License.",
        ),
        "ASL2-Short": (
            "// Licensed to {licensor} under one or more agreements.",
            "// {licensor} licenses this file to you under the Apache 2.0 License.",
            "// See the LICENSE file in the project root for more information.",
        ),
        "Elastic": (
            "// Copyright Elasticsearch B.V. and/or licensed to Elasticsearch B.V. under one",
            "// or more contributor license agreements. Licensed under the Elastic License;",
            "// you may not use this file except in compliance with the Elastic License.",
        ),
        "Elasticv2": (
            "// Copyright Elasticsearch B.V. and/or licensed to Elasticsearch B.V. under one",
            "// or more contributor license agreements. Licensed under the Elastic License 2.0;",
            "// you may not use this file except in compliance with the Elastic License 2.0.",
        ),
        "Cloud": (
            "// ELASTICSEARCH CONFIDENTIAL",
            "// __________________",
            "//",
            "//  Copyright Elasticsearch B.V. All rights reserved.",
            "//",
            "// NOTICE:  All information contained herein is, and remains",
            "// the property of Elasticsearch B.V. and its suppliers, if any.",
            "// The intellectual and technical concepts contained herein",
            "// are proprietary to Elasticsearch B.V. and its suppliers and",
            "// may be covered by U.S. and Foreign Patents, patents in",
            "// process, and are protected by trade secret or copyright",
            "// law.  Dissemination of this information or reproduction of",
            "// this material is strictly forbidden unless prior written",
            "// permission is obtained from Elasticsearch B.V.",
        ),
    }
)


@dataclass(frozen=True)
class HeaderTemplate:
    """A header rendered for a single licensor."""

    kind: str
    lines: Tuple[str, ...]

    def to_bytes(self) -> bytes:
        return "".join(f"{line}\n" for line in self.lines).encode("utf-8")


class HeaderRegistry(Mapping[str, Tuple[str, ...]]):
    """Read-only mapping of license kind to its template lines."""

    def __init__(self, headers: Mapping[str, Sequence[str]]) -> None:
        self._headers: Dict[str, Tuple[str, ...]] = {
            kind: tuple(lines) for kind, lines in headers.items()
        }
        self.max_line_length = max(
            (sum(len(line.encode("utf-8")) for line in lines) for lines in self._headers.values()),
            default=0,
        )

    def __getitem__(self, kind: str) -> Tuple[str, ...]:
        return self._headers[kind]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def kinds(self) -> list[str]:
        return list(self._headers)

    def render(self, kind: str, licensor: str) -> HeaderTemplate:
        try:
            lines = self._headers[kind]
        except KeyError:
            raise UnknownLicenseError(kind) from None
        rendered = tuple(
            line.replace(LICENSOR_PLACEHOLDER, licensor) if LICENSOR_PLACEHOLDER in line else line
            for line in lines
        )
        return HeaderTemplate(kind=kind, lines=rendered)


DEFAULT_REGISTRY = HeaderRegistry(HEADERS)
