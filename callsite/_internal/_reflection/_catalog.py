# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""The set of types visible to a session."""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

import inspect
import logging
import sys

from callsite._internal._utils import wildcard_match

from ._introspect import Introspector

if TYPE_CHECKING:
    import types
    from collections.abc import Iterable, Iterator
    from ._types import TypeDescriptor


logger = logging.getLogger(__name__)


class TypeCatalog:
    """An index of type descriptors by full name.

    Explicitly registered descriptors are returned as-is.  Any other
    Python type reached through :meth:`describe` or :meth:`type_of` is
    introspected on first use and cached until :meth:`clear_cache`.
    """

    def __init__(self, types: Iterable[TypeDescriptor] = ()) -> None:
        self._types: dict[str, TypeDescriptor] = {}
        for t in types:
            self.register(t)
        self._introspector = Introspector(self._types.get)

    @classmethod
    def from_modules(cls, *modules: types.ModuleType) -> TypeCatalog:
        """Build a catalog of every class defined in *modules*."""
        catalog = cls()
        for module in modules:
            for _, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ == module.__name__:
                    catalog.register(catalog.describe(obj))
        logger.debug(
            "catalog built from %s: %d types",
            [m.__name__ for m in modules],
            len(catalog),
        )
        return catalog

    def register(self, t: TypeDescriptor) -> None:
        self._types[t.full_name] = t

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def __getitem__(self, name: str) -> TypeDescriptor:
        return self._types[name]

    def get(
        self,
        name: str,
        default: TypeDescriptor | None = None,
    ) -> TypeDescriptor | None:
        return self._types.get(name, default)

    def find(self, short_name: str) -> list[TypeDescriptor]:
        """Registered types whose local name is *short_name*."""
        return [t for t in self._types.values() if t.name == short_name]

    def list_types(
        self,
        pattern: str = "*",
        *,
        namespace: str | None = None,
    ) -> list[TypeDescriptor]:
        return [
            t
            for t in self._types.values()
            if (namespace is None or t.namespace == namespace)
            and wildcard_match(pattern, t.name, t.full_name)
        ]

    def describe(self, annotation: Any) -> TypeDescriptor:
        return self._introspector.describe(annotation)

    def type_of(self, value: Any) -> TypeDescriptor:
        """The runtime type of *value*, parametrized where Python kept
        the arguments (``Box[int]()`` remembers ``Box[int]``)."""
        return self.describe(getattr(value, "__orig_class__", type(value)))

    def clear_cache(self) -> None:
        self._introspector.clear()


def get_modules_by_pattern(pattern: str) -> list[types.ModuleType]:
    """Loaded modules whose name matches the wildcard *pattern*."""
    return [
        sys.modules[name]
        for name in sorted(sys.modules)
        if sys.modules[name] is not None and wildcard_match(pattern, name)
    ]
