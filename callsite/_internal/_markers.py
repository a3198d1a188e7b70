# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Annotations and decorators understood by the introspector."""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable


_T = TypeVar("_T")
_F = TypeVar("_F")

ATTRIBUTES_ATTR = "__callsite_attributes__"


class Ref(Generic[_T]):
    """A by-reference cell: the callee may replace ``value``.

    A parameter annotated ``Ref[int]`` is a by-ref ``int`` parameter.
    """

    def __init__(self, value: _T) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return bool(self.value == other.value)

    __hash__ = None  # type: ignore [assignment]


def attributes(*markers: Any) -> Callable[[_F], _F]:
    """Attach marker attributes to a method.

    Markers may be classes, instances (their class is recorded) or plain
    strings.  The member enumerator can then filter on them::

        class Service:
            @attributes(Endpoint, "Cached")
            def fetch(self, key: str) -> bytes: ...
    """

    def decorator(fn: _F) -> _F:
        target = getattr(fn, "__func__", fn)
        existing = getattr(target, ATTRIBUTES_ATTR, ())
        setattr(target, ATTRIBUTES_ATTR, (*existing, *markers))
        return fn

    return decorator
