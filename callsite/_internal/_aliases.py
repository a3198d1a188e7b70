# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.


from __future__ import annotations
from typing import TYPE_CHECKING

from ._reflection import TypeDescriptor

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


class AliasRegistry:
    """Short names for types, owned by one session."""

    def __init__(
        self,
        aliases: Mapping[str, TypeDescriptor] | None = None,
    ) -> None:
        self._aliases: dict[str, TypeDescriptor] = {}
        if aliases:
            for name, t in aliases.items():
                self.add(name, t)

    def add(self, alias: str, t: TypeDescriptor) -> None:
        if not alias or not alias.isidentifier():
            raise ValueError(f"invalid type alias: {alias!r}")
        existing = self._aliases.get(alias)
        if existing is not None and existing != t:
            raise ValueError(
                f"type alias {alias!r} already refers to"
                f" {existing.full_name}"
            )
        self._aliases[alias] = t

    def remove(self, alias: str) -> None:
        del self._aliases[alias]

    def get(self, alias: str) -> TypeDescriptor | None:
        return self._aliases.get(alias)

    def clear(self) -> None:
        self._aliases.clear()

    def __contains__(self, alias: object) -> bool:
        return alias in self._aliases

    def __iter__(self) -> Iterator[str]:
        return iter(self._aliases)

    def __len__(self) -> int:
        return len(self._aliases)
