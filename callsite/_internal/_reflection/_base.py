# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.


from __future__ import annotations
from typing import Any, NamedTuple, TypeVar
from typing_extensions import dataclass_transform

import dataclasses


class QualName(NamedTuple):
    namespace: str
    name: str

    def as_full_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        else:
            return self.name


def parse_name(name: str) -> QualName:
    """Split ``pkg.mod.Type[args]`` into namespace and local name."""
    head, bracket, tail = name.partition("[")
    namespace, _, local = head.rpartition(".")
    return QualName(namespace, f"{local}{bracket}{tail}")


_T = TypeVar("_T")


_dataclass = dataclasses.dataclass(eq=False, frozen=True, kw_only=True)
_sobject_dataclass = dataclasses.dataclass(
    eq=False, frozen=True, kw_only=True, repr=False
)


@dataclass_transform(
    frozen_default=True,
    kw_only_default=True,
)
def struct(t: type[_T]) -> type[_T]:
    return _dataclass(t)


@dataclass_transform(
    eq_default=False,
    frozen_default=True,
    kw_only_default=True,
)
def sobject(t: type[_T]) -> type[_T]:
    return _sobject_dataclass(t)


def set_frozen(obj: object, **fields: Any) -> None:
    """Fill in fields of a frozen descriptor while it is being built.

    Descriptors may refer to each other cyclically (a type and its
    methods, a class implementing an interface parametrized by itself),
    so the introspector creates them empty and completes them here
    before they are handed out.
    """
    for name, value in fields.items():
        object.__setattr__(obj, name, value)  # noqa: PLC2801


@sobject
class Descriptor:
    namespace: str
    name: str

    @property
    def full_name(self) -> str:
        return QualName(self.namespace, self.name).as_full_name()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Descriptor):
            return NotImplemented
        else:
            return self.full_name == other.full_name

    def __hash__(self) -> int:
        return hash(self.full_name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.full_name!r}>"
