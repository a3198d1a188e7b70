# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""The per-session facade over resolution and invocation."""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

import logging

from callsite.errors import (
    CallsiteError,
    GenericInferenceError,
    NotFoundError,
)

from ._aliases import AliasRegistry
from ._assignability import is_assignable_to_generic
from ._binding import BindingResult, bind_arguments, select_and_bind
from ._config import EngineConfig
from ._generic_binding import (
    explicit_element_type,
    infer_argument_types,
    infer_element_types,
    invoke_generic,
    resolve_generic,
    select_kind,
    target_type,
    unwrap_value,
    wrap_by_ref,
)
from ._invoke import invoke_method
from ._members import find_methods
from ._prompt import ConsolePrompt
from ._reflection import (
    MethodDescriptor,
    SignatureStyle,
    TypeCatalog,
    TypeDescriptor,
)
from ._signature import render_signature

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from types import TracebackType
    from typing_extensions import Self
    from ._prompt import Prompt
    from ._reflection import Visibility


logger = logging.getLogger(__name__)


class Session:
    """Owns the catalog, prompt, aliases and configuration used to
    resolve and invoke call sites.

    Use as a context manager; closing drops the aliases and the
    catalog's introspection cache::

        with Session(TypeCatalog.from_modules(shapes)) as s:
            area = s.resolve_and_invoke(circle, "area")
    """

    def __init__(
        self,
        catalog: TypeCatalog | None = None,
        *,
        prompt: Prompt | None = None,
        aliases: AliasRegistry | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.config = config if config is not None else EngineConfig()
        self.catalog = catalog if catalog is not None else TypeCatalog()
        self.prompt: Prompt = (
            prompt
            if prompt is not None
            else ConsolePrompt(color=self.config.color)
        )
        self.aliases = aliases if aliases is not None else AliasRegistry()
        self._closed = False

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self.aliases.clear()
        self.catalog.clear_cache()
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise CallsiteError("session is closed")

    def resolve_type(self, name: str) -> TypeDescriptor:
        """Find a type by alias, full name or unique short name."""
        self._check_open()
        t = self.aliases.get(name)
        if t is not None:
            return t
        t = self.catalog.get(name)
        if t is not None:
            return t
        found = self.catalog.find(name)
        if len(found) == 1:
            return found[0]
        elif found:
            names = ", ".join(sorted(f.full_name for f in found))
            raise NotFoundError(
                f"type name {name!r} is ambiguous: {names}", type_name=name
            )
        raise NotFoundError(f"unknown type {name!r}", type_name=name)

    def describe(self, target: Any) -> TypeDescriptor:
        if isinstance(target, str):
            return self.resolve_type(target)
        return target_type(target, self.catalog)

    def find_methods(
        self,
        target: Any,
        name_pattern: str = "*",
        attributes: Iterable[str] | None = None,
        *,
        visibility: Visibility | None = None,
        no_warn: bool | None = None,
    ) -> list[MethodDescriptor]:
        self._check_open()
        return find_methods(
            self.describe(target),
            name_pattern,
            visibility if visibility is not None else self.config.visibility,
            attributes,
            no_warn=no_warn if no_warn is not None else self.config.no_warn,
        )

    def render_signature(
        self,
        method: MethodDescriptor,
        style: SignatureStyle = SignatureStyle.Full,
        generic_args: Sequence[TypeDescriptor] | None = None,
    ) -> str:
        return render_signature(method, style, generic_args)

    def test_generic_assignability(
        self,
        concrete: Any,
        target: Any,
        *,
        strict: bool = False,
    ) -> tuple[bool, TypeDescriptor | None]:
        self._check_open()
        return is_assignable_to_generic(
            self.describe(concrete),
            self.describe(target),
            strict=strict,
            max_depth=self.config.max_hierarchy_depth,
        )

    def bind(
        self,
        method: MethodDescriptor,
        arguments: Sequence[Any] = (),
    ) -> BindingResult:
        self._check_open()
        return bind_arguments(
            method, arguments, catalog=self.catalog, prompt=self.prompt
        )

    def resolve_and_invoke(
        self,
        target: Any,
        member: str | MethodDescriptor,
        arguments: Sequence[Any] = (),
        *,
        is_static: bool = False,
        explicit_param_types: Sequence[Any] | None = None,
    ) -> Any:
        """Resolve *member* on *target* for *arguments* and call it.

        Args:
            target: Instance, class, type descriptor or type name.
            member: Member name (``new`` for the constructor) or a
                method descriptor to bind and call directly.
            arguments: Supplied argument values.
            is_static: Resolve among static rather than instance methods.
            explicit_param_types: Parameter types for generic matching,
                instead of the runtime types of *arguments*.

        Raises:
            NotFoundError: No member of that name.
            GenericInferenceError: No generic candidate fits.
            AmbiguousOverloadError: The user aborted an overload choice.
            BindingError: The user aborted a value prompt.
            InvocationError: The call raised.
        """
        self._check_open()
        if isinstance(target, str):
            target = self.resolve_type(target)
        values = list(arguments)

        if isinstance(member, MethodDescriptor):
            return self._invoke_descriptor(
                member, target, values, explicit_param_types
            )

        t = self.describe(target)
        candidates = select_kind(
            find_methods(
                t,
                member,
                self.config.visibility,
                no_warn=self.config.no_warn,
            ),
            member,
            is_static,
        )
        if not candidates:
            kind = "static member" if is_static else "member"
            raise NotFoundError(
                f"{t.display_name} has no {kind} named {member!r}",
                type_name=t.full_name,
                member_name=member,
            )

        if any(m.is_generic for m in candidates):
            logger.debug("%s.%s: generic path", t.display_name, member)
            return invoke_generic(
                target,
                member,
                values,
                explicit_param_types,
                is_static=is_static,
                catalog=self.catalog,
            )

        result = select_and_bind(
            candidates,
            values,
            catalog=self.catalog,
            prompt=self.prompt,
            max_attempts=self.config.max_rebind_attempts,
        )
        return invoke_method(result.method, target, result.bound_arguments)

    def _invoke_descriptor(
        self,
        method: MethodDescriptor,
        target: Any,
        values: list[Any],
        explicit_param_types: Sequence[Any] | None,
    ) -> Any:
        if method.is_generic:
            values = [unwrap_value(v) for v in values]
            if explicit_param_types is None:
                types = infer_argument_types(values, self.catalog)
                elements = infer_element_types(values, self.catalog)
            else:
                types = [self.describe(p) for p in explicit_param_types]
                elements = [
                    explicit_element_type(p, self.catalog)
                    if not isinstance(p, str)
                    else None
                    for p in explicit_param_types
                ]
            closed = resolve_generic([method], types, elements)
            if closed is None:
                raise GenericInferenceError(
                    f"cannot infer type arguments of"
                    f" {render_signature(method, SignatureStyle.Simple)}",
                    type_name=method.declaring_type.full_name,
                    member_name=method.name,
                )
            return invoke_method(closed, target, wrap_by_ref(closed, values))

        result = self.bind(method, values)
        return invoke_method(result.method, target, result.bound_arguments)
