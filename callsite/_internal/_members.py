# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Constructor and method enumeration."""

from __future__ import annotations
from typing import TYPE_CHECKING

import logging
import warnings

from callsite.errors import CallsiteWarning

from ._reflection import MethodDescriptor, TypeDescriptor, Visibility
from ._utils import wildcard_match

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


logger = logging.getLogger(__name__)

CONSTRUCTOR_NAMES = frozenset({"__init__", "new"})


def _targets_constructors(pattern: str) -> bool:
    return pattern.lower() in CONSTRUCTOR_NAMES


def _visible(method: MethodDescriptor, visibility: Visibility) -> bool:
    if method.is_accessor and Visibility.FORCE not in visibility:
        return False
    if method.is_public:
        if Visibility.PUBLIC not in visibility:
            return False
    elif Visibility.NON_PUBLIC not in visibility:
        return False
    if method.is_static or method.is_constructor:
        return Visibility.STATIC in visibility
    else:
        return Visibility.INSTANCE in visibility


def _name_matches(method: MethodDescriptor, pattern: str) -> bool:
    if method.is_constructor and pattern.lower() == "new":
        return True
    return wildcard_match(
        pattern,
        method.name,
        f"{method.declaring_type.name}.{method.name}",
    )


def _attributes_match(
    method: MethodDescriptor,
    patterns: Iterable[str],
) -> bool:
    return any(
        wildcard_match(pattern, attr.name, attr.full_name)
        for pattern in patterns
        for attr in method.attributes
    )


def _iter_methods(t: TypeDescriptor) -> Iterator[MethodDescriptor]:
    """Methods of *t* then of its base chain, derived hiding base."""
    seen = set()
    for level, owner in enumerate((t, *t.iter_base_types())):
        for method in owner.methods:
            if method.is_constructor and level > 0:
                continue
            key = method.signature_key
            if key in seen:
                continue
            seen.add(key)
            yield method


def find_methods(
    t: TypeDescriptor,
    name_pattern: str = "*",
    visibility: Visibility = Visibility.DEFAULT,
    attributes: Iterable[str] | None = None,
    *,
    no_warn: bool = False,
) -> list[MethodDescriptor]:
    """List the constructors and methods of *t* matching the filters.

    Args:
        t: The type to enumerate.
        name_pattern: Case-insensitive wildcard (``*``, ``?``) matched
            against the bare and the ``Type.name`` qualified method name.
            ``new`` selects the constructors.
        visibility: Which members to include.  Property accessors are
            only listed with ``Visibility.FORCE``.
        attributes: If given, only methods carrying an attribute whose
            name or full name matches one of these patterns.
        no_warn: Do not warn when nothing matches.

    Returns:
        Matching methods, declared members first and then inherited
        ones, each in declaration order.
    """
    attr_patterns = list(attributes) if attributes is not None else None
    result = [
        m
        for m in _iter_methods(t)
        if _visible(m, visibility)
        and _name_matches(m, name_pattern)
        and (attr_patterns is None or _attributes_match(m, attr_patterns))
    ]

    logger.debug(
        "find_methods(%s, %r, %s): %d match(es)",
        t.display_name,
        name_pattern,
        visibility,
        len(result),
    )

    if not result and not no_warn:
        if _targets_constructors(name_pattern):
            msg = f"{t.display_name} has no public constructors"
        else:
            msg = (
                f"no members of {t.display_name} match"
                f" {name_pattern!r}"
            )
        warnings.warn(msg, CallsiteWarning, stacklevel=2)

    return result
