# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Miscellaneous utilities."""

from typing import Any, final

import fnmatch
import re
import sys
import types


@final
class UnspecifiedType:
    """A type used as a sentinel for unspecified values."""


Unspecified = UnspecifiedType()


def type_repr(t: Any) -> str:
    if isinstance(t, type):
        if t.__module__ == "builtins":
            return t.__qualname__
        else:
            return f"{t.__module__}.{t.__qualname__}"
    else:
        return repr(t)


def module_of(obj: Any) -> types.ModuleType | None:
    return sys.modules.get(getattr(obj, "__module__", None) or "")


def module_ns_of(obj: Any) -> dict[str, Any]:
    mod = module_of(obj)
    return dict(mod.__dict__) if mod is not None else {}


def wildcard_match(pattern: str, *names: str) -> bool:
    """Case-insensitive ``*``/``?`` match against any of *names*."""
    pat = pattern.lower()
    return any(fnmatch.fnmatchcase(n.lower(), pat) for n in names)


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    name = name.split("[", 1)[0].rpartition(".")[2].strip("_") or "obj"
    return _CAMEL_BOUNDARY.sub("_", name).lower()
