# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Assignability of a concrete type to a generic type or interface."""

from __future__ import annotations

import logging

from callsite.errors import TypeHierarchyError

from ._reflection import TypeDescriptor


logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64


def _arguments_match(
    actual: TypeDescriptor,
    wanted: TypeDescriptor,
) -> bool:
    """Pairwise compare generic arguments of two types of one family."""
    for have, want in zip(
        actual.generic_parameters, wanted.generic_parameters, strict=True
    ):
        if want.is_generic_parameter:
            bound = want.constraint
            if bound is not None and not bound.is_assignable_from(have):
                return False
        elif not want.is_assignable_from(have):
            return False
    return True


def _match_level(
    current: TypeDescriptor,
    target: TypeDescriptor,
) -> tuple[bool, TypeDescriptor | None]:
    if current == target or (
        current.is_closed_generic and current.generic_definition == target
    ):
        return True, None

    target_definition = target.generic_definition
    for iface in current.all_interfaces():
        definition = iface.generic_definition
        if iface == target or (
            definition is not None and definition == target
        ):
            return True, iface
        if (
            target_definition is not None
            and target.definition is not None
            and definition == target_definition
            and _arguments_match(iface, target)
        ):
            return True, iface

    return False, None


def is_assignable_to_generic(
    concrete: TypeDescriptor,
    target: TypeDescriptor,
    *,
    strict: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[bool, TypeDescriptor | None]:
    """Test whether *concrete* is assignable to *target*.

    *target* is usually an open generic definition (``IContainer``) or
    a closed or partially open generic (``IContainer[str]``).  The type
    itself and each level of its base chain are checked in turn; at
    each level the interfaces are searched in declaration order and the
    first qualifying one wins.

    Args:
        concrete: The type of the value being assigned.
        target: The generic type or interface being assigned to.
        strict: If *target* is closed and nothing matched at a level,
            retry that level against its open generic definition.
        max_depth: Upper bound on the number of levels examined.

    Returns:
        A ``(matched, interface)`` pair.  *interface* is the implemented
        interface that satisfied the test, or ``None`` if the match was
        on the type itself (or there was no match).

    Raises:
        TypeHierarchyError: The hierarchy is deeper than *max_depth*.
    """
    current: TypeDescriptor | None = concrete
    wanted = target
    for _ in range(max_depth):
        if current is None:
            logger.debug(
                "%s is not assignable to %s",
                concrete.display_name,
                target.display_name,
            )
            return False, None

        matched, iface = _match_level(current, wanted)
        if matched:
            logger.debug(
                "%s is assignable to %s via %s",
                concrete.display_name,
                target.display_name,
                iface.display_name if iface is not None else current.display_name,
            )
            return True, iface

        if strict and wanted.is_closed_generic:
            definition = wanted.generic_definition
            assert definition is not None
            wanted = definition
            continue

        current = current.base_type

    raise TypeHierarchyError(
        f"type hierarchy of {concrete.display_name!r} is deeper than"
        f" {max_depth} levels while testing against"
        f" {target.display_name!r}"
    )
