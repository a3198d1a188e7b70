# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.


from __future__ import annotations
from typing import TextIO

import dataclasses
import os
import sys


@dataclasses.dataclass(frozen=True)
class Colors:
    HEADER: str = ""
    BLUE: str = ""
    CYAN: str = ""
    GREEN: str = ""
    WARNING: str = ""
    FAIL: str = ""
    ENDC: str = ""
    BOLD: str = ""
    UNDERLINE: str = ""


_ANSI = Colors(
    HEADER="\033[95m",
    BLUE="\033[94m",
    CYAN="\033[96m",
    GREEN="\033[92m",
    WARNING="\033[93m",
    FAIL="\033[91m",
    ENDC="\033[0m",
    BOLD="\033[1m",
    UNDERLINE="\033[4m",
)

_PLAIN = Colors()


def use_color(
    stream: TextIO | None = None,
    *,
    force: bool | None = None,
) -> bool:
    if force is not None:
        return force
    if os.environ.get("NO_COLOR"):
        return False
    if stream is None:
        stream = sys.stderr
    isatty = getattr(stream, "isatty", None)
    return bool(isatty is not None and isatty())


def get_color(
    stream: TextIO | None = None,
    *,
    force: bool | None = None,
) -> Colors:
    return _ANSI if use_color(stream, force=force) else _PLAIN
