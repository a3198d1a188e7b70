# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.
#

from __future__ import annotations
from typing import TYPE_CHECKING, Any
from typing_extensions import Self, TypeAliasType

import dataclasses
import functools

from ._base import sobject, struct
from ._enums import ParameterKind
from ._types import TypeDescriptor

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


SignatureKey = TypeAliasType(
    "SignatureKey", tuple[str, tuple[tuple[ParameterKind, str], ...]]
)
"""Name plus parameter shape; a derived method with the same key hides
the base method."""


@struct
class AttributeDescriptor:
    """A marker attached to a method, e.g. ``abc.abstractmethod``."""

    name: str
    full_name: str


@struct
class ParameterDescriptor:
    """Represents a parameter in a method's signature."""

    name: str
    type: TypeDescriptor
    position: int
    kind: ParameterKind = ParameterKind.Positional
    is_generic_placeholder: bool = False
    is_by_ref: bool = False
    is_array: bool = False

    def __str__(self) -> str:
        """Return a human-readable string representation of the parameter."""
        return self.format(self.type.display_name)

    def format(self, typespec: str) -> str:
        """Render as ``name: typespec`` with array, by-ref and variadic
        markers applied."""
        if self.is_array and not self.is_variadic:
            typespec = f"list[{typespec}]"
        if self.is_by_ref:
            typespec = f"Ref[{typespec}]"
        name = f"*{self.name}" if self.is_variadic else self.name
        return f"{name}: {typespec}"

    @property
    def is_variadic(self) -> bool:
        """Whether this parameter accepts a variable number of arguments."""
        return self.kind is ParameterKind.Variadic

    @property
    def is_keyword_only(self) -> bool:
        return self.kind is ParameterKind.KeywordOnly

    def substitute(
        self,
        mapping: Mapping[TypeDescriptor, TypeDescriptor],
    ) -> Self:
        """Create a version with generic placeholders replaced.

        Args:
            mapping: Placeholder to concrete type bindings.

        Returns:
            A new ParameterDescriptor; it stays a generic slot only if
            its type was left unbound.
        """
        new_type = self.type.substitute(mapping)
        if new_type is self.type:
            return self
        return dataclasses.replace(
            self,
            type=new_type,
            is_generic_placeholder=False,
        )


@sobject
class MethodDescriptor:
    """A constructor or method of a type, as seen by the resolver.

    Descriptors are built from the catalog per query and never mutated;
    closing a generic method or substituting a constructed declaring
    type produces a new descriptor.
    """

    name: str
    declaring_type: TypeDescriptor
    parameters: tuple[ParameterDescriptor, ...]
    return_type: TypeDescriptor
    is_constructor: bool = False
    is_static: bool = False
    is_classmethod: bool = False
    is_accessor: bool = False
    is_public: bool = True
    generic_parameters: tuple[TypeDescriptor, ...] = ()
    generic_arguments: tuple[TypeDescriptor, ...] = ()
    generic_definition: MethodDescriptor | None = None
    attributes: tuple[AttributeDescriptor, ...] = ()
    impl: Callable[..., Any] | None = None

    def __repr__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"<MethodDescriptor {self.qualified_name}({params})>"

    @property
    def qualified_name(self) -> str:
        return f"{self.declaring_type.display_name}.{self.name}"

    @property
    def is_generic(self) -> bool:
        return bool(self.generic_parameters)

    @property
    def is_closed_generic(self) -> bool:
        return bool(self.generic_arguments)

    @functools.cached_property
    def generic_slots(self) -> tuple[int, ...]:
        """Positions of parameters typed with the method's own generics."""
        return tuple(
            i for i, p in enumerate(self.parameters) if p.is_generic_placeholder
        )

    @functools.cached_property
    def signature_key(self) -> SignatureKey:
        return (
            self.name,
            tuple((p.kind, p.type.full_name) for p in self.parameters),
        )

    def substitute(
        self,
        mapping: Mapping[TypeDescriptor, TypeDescriptor],
        *,
        declaring_type: TypeDescriptor | None = None,
    ) -> Self:
        """Create a version with generic placeholders replaced.

        Args:
            mapping: Placeholder to concrete type bindings.
            declaring_type: Replacement declaring type, used when the
                method is projected onto a constructed generic type.

        Returns:
            A new MethodDescriptor with substituted parameter and
            return types.
        """
        return dataclasses.replace(
            self,
            declaring_type=(
                declaring_type
                if declaring_type is not None
                else self.declaring_type
            ),
            parameters=tuple(p.substitute(mapping) for p in self.parameters),
            return_type=self.return_type.substitute(mapping),
        )

    def make_generic(self, *args: TypeDescriptor) -> Self:
        """Close this generic method definition over *args*."""
        if not self.is_generic:
            raise TypeError(
                f"{self.qualified_name} is not a generic method definition"
            )

        expected = len(self.generic_parameters)
        if len(args) != expected:
            raise TypeError(
                f"method {self.qualified_name!r} expects {expected} type"
                f" argument{'s' if expected != 1 else ''}, got {len(args)}"
            )

        closed = self.substitute(
            dict(zip(self.generic_parameters, args, strict=True))
        )
        return dataclasses.replace(
            closed,
            generic_parameters=(),
            generic_arguments=tuple(args),
            generic_definition=self,
        )
