# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.


from __future__ import annotations
from typing import (
    TYPE_CHECKING,
    Any,
    TypeGuard,
)

import dataclasses
import functools

from callsite._internal import _typing_check

from ._base import sobject, Descriptor
from ._enums import TypeKind

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from ._callables import MethodDescriptor


GenericMapping = dict["TypeDescriptor", "TypeDescriptor"]


@sobject
class TypeDescriptor(Descriptor):
    """A snapshot of one type: identity, base, interfaces, generics.

    Generic definitions list their placeholders in
    ``generic_parameters``; constructed (closed or partially open)
    generics list their arguments there instead and point back at the
    definition they were made from.  Base type, interfaces and methods
    of a constructed generic are derived lazily from the definition.
    """

    kind: TypeKind = TypeKind.Class
    base: TypeDescriptor | None = None
    declared_interfaces: tuple[TypeDescriptor, ...] = ()
    generic_parameters: tuple[TypeDescriptor, ...] = ()
    definition: TypeDescriptor | None = None
    constraint: TypeDescriptor | None = None
    position: int = -1
    declared_methods: tuple[MethodDescriptor, ...] = ()
    py_type: Any = None
    _constructed: dict[tuple[TypeDescriptor, ...], TypeDescriptor] = (
        dataclasses.field(default_factory=dict, init=False)
    )

    @property
    def is_generic_parameter(self) -> bool:
        return self.kind is TypeKind.GenericParameter

    @property
    def is_interface(self) -> bool:
        return self.kind is TypeKind.Interface

    @property
    def is_object(self) -> bool:
        return self.full_name == "builtins.object"

    @property
    def is_generic(self) -> bool:
        return bool(self.generic_parameters)

    @property
    def is_generic_definition(self) -> bool:
        return self.is_generic and self.definition is None

    @property
    def is_closed_generic(self) -> bool:
        return (
            self.definition is not None
            and not self.contains_generic_parameters
        )

    @functools.cached_property
    def contains_generic_parameters(self) -> bool:
        if self.is_generic_parameter:
            return True
        elif self.definition is not None:
            return any(
                a.contains_generic_parameters for a in self.generic_parameters
            )
        else:
            return False

    @property
    def generic_definition(self) -> TypeDescriptor | None:
        """The open definition; a definition is its own definition."""
        if self.is_generic_definition:
            return self
        else:
            return self.definition

    @functools.cached_property
    def generic_mapping(self) -> GenericMapping:
        if self.definition is None:
            return {}
        return dict(
            zip(
                self.definition.generic_parameters,
                self.generic_parameters,
                strict=True,
            )
        )

    @functools.cached_property
    def base_type(self) -> TypeDescriptor | None:
        if self.definition is not None:
            base = self.definition.base_type
            return base.substitute(self.generic_mapping) if base else None
        else:
            return self.base

    @functools.cached_property
    def interfaces(self) -> tuple[TypeDescriptor, ...]:
        if self.definition is not None:
            return tuple(
                i.substitute(self.generic_mapping)
                for i in self.definition.interfaces
            )
        else:
            return self.declared_interfaces

    @functools.cached_property
    def methods(self) -> tuple[MethodDescriptor, ...]:
        if self.definition is not None:
            return tuple(
                m.substitute(self.generic_mapping, declaring_type=self)
                for m in self.definition.methods
            )
        else:
            return self.declared_methods

    @functools.cached_property
    def display_name(self) -> str:
        if self.definition is not None:
            args = ", ".join(a.display_name for a in self.generic_parameters)
            return f"{self.definition.display_name}[{args}]"
        else:
            return self.name

    @functools.cached_property
    def code_name(self) -> str:
        """Module-qualified name as it would be spelled in code."""
        if self.definition is not None:
            args = ", ".join(a.code_name for a in self.generic_parameters)
            return f"{self.definition.code_name}[{args}]"
        elif (
            self.namespace == "builtins"
            or self.is_generic_parameter
            or self.kind is TypeKind.Special
        ):
            return self.name
        else:
            return self.full_name

    def iter_base_types(self) -> Iterator[TypeDescriptor]:
        seen: set[TypeDescriptor] = {self}
        base = self.base_type
        while base is not None and base not in seen:
            seen.add(base)
            yield base
            base = base.base_type

    def all_interfaces(self) -> tuple[TypeDescriptor, ...]:
        """Interfaces in declaration order, through the interface list.

        Interfaces inherited through the base chain are not included.
        """
        result: list[TypeDescriptor] = []

        def _walk(t: TypeDescriptor) -> None:
            for iface in t.interfaces:
                if iface not in result:
                    result.append(iface)
                    _walk(iface)

        _walk(self)
        return tuple(result)

    def make_generic(self, *args: TypeDescriptor) -> TypeDescriptor:
        """Close this generic definition over *args*."""
        if not self.is_generic_definition:
            raise TypeError(
                f"{self.full_name} is not a generic type definition"
            )

        expected = len(self.generic_parameters)
        if len(args) != expected:
            raise TypeError(
                f"type {self.display_name!r} expects {expected} type"
                f" parameter{'s' if expected != 1 else ''},"
                f" got {len(args)}"
            )

        result = self._constructed.get(args)
        if result is not None:
            return result

        py_type = None
        if self.py_type is not None and all(
            a.py_type is not None for a in args
        ):
            try:
                py_type = self.py_type[tuple(a.py_type for a in args)]
            except TypeError:
                py_type = None

        arg_names = ", ".join(a.full_name for a in args)
        result = TypeDescriptor(
            namespace=self.namespace,
            name=f"{self.name}[{arg_names}]",
            kind=self.kind,
            generic_parameters=args,
            definition=self,
            py_type=py_type,
        )
        self._constructed[args] = result
        return result

    def substitute(self, mapping: Mapping[TypeDescriptor, TypeDescriptor]) -> TypeDescriptor:
        if not mapping:
            return self
        elif self.is_generic_parameter:
            return mapping.get(self, self)
        elif self.definition is not None and self.contains_generic_parameters:
            return self.definition.make_generic(
                *(a.substitute(mapping) for a in self.generic_parameters)
            )
        else:
            return self

    def is_assignable_from(self, other: TypeDescriptor) -> bool:
        """Whether a value of type *other* can be used where *self* is
        expected, through inheritance or interface implementation."""
        if self == other or self.is_object:
            return True

        if other.is_generic_parameter:
            bound = other.constraint
            return bound is not None and self.is_assignable_from(bound)

        if self.is_generic_parameter:
            bound = self.constraint
            return bound is None or bound.is_assignable_from(other)

        if self.kind is TypeKind.Special or other.kind is TypeKind.Special:
            if self.py_type is not None and other.py_type is not None:
                return _typing_check.issubclass_of(other.py_type, self.py_type)
            return False

        for t in (other, *other.iter_base_types()):
            if t == self or self in t.all_interfaces():
                return True

        # Virtual subclasses (ABC.register) are invisible to the
        # descriptor graph.
        return (
            isinstance(self.py_type, type)
            and isinstance(other.py_type, type)
            and not self.is_generic
            and issubclass(other.py_type, self.py_type)
        )


def is_generic_parameter(t: TypeDescriptor) -> TypeGuard[TypeDescriptor]:
    return t.is_generic_parameter


def make_generic_parameter(
    name: str,
    *,
    owner: str,
    position: int,
    constraint: TypeDescriptor | None = None,
    py_type: Any = None,
) -> TypeDescriptor:
    return TypeDescriptor(
        namespace=owner,
        name=name,
        kind=TypeKind.GenericParameter,
        constraint=constraint,
        position=position,
        py_type=py_type,
    )
