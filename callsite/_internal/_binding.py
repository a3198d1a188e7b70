# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Argument-to-parameter binding and overload selection."""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

import logging
import warnings

from callsite.errors import (
    AmbiguousOverloadError,
    BindingError,
    BindingWarning,
    NotFoundError,
    PromptAborted,
)

from . import _typing_check
from ._assignability import is_assignable_to_generic
from ._casting import CastError, cast_text
from ._markers import Ref
from ._prompt import Choice, ChoiceSet
from ._reflection import (
    MethodDescriptor,
    ParameterDescriptor,
    SignatureStyle,
    TypeDescriptor,
    TypeKind,
)
from ._reflection._base import struct
from ._signature import render_signature

if TYPE_CHECKING:
    from collections.abc import Sequence
    from ._prompt import Prompt
    from ._reflection import TypeCatalog


logger = logging.getLogger(__name__)


@struct
class BindingResult:
    method: MethodDescriptor
    bound_arguments: tuple[Any, ...]
    closed_generic_parameters: tuple[TypeDescriptor, ...] = ()
    prompted: tuple[int, ...] = ()
    failures: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if len(self.bound_arguments) != len(self.method.parameters):
            raise ValueError(
                f"{self.method.qualified_name} takes"
                f" {len(self.method.parameters)} argument(s),"
                f" {len(self.bound_arguments)} bound"
            )

    @property
    def ok(self) -> bool:
        return not self.failures


def accepts_type(
    t: TypeDescriptor,
    value: Any,
    catalog: TypeCatalog,
) -> bool:
    """Whether *value* can be passed where *t* is expected."""
    if t.is_generic_parameter:
        return t.constraint is None or accepts_type(
            t.constraint, value, catalog
        )
    if t.is_object:
        return True
    if t.kind is TypeKind.Special:
        try:
            return _typing_check.isinstance_of(value, t.py_type)
        except TypeError:
            return False

    actual = catalog.type_of(value)
    if t.is_assignable_from(actual):
        return True
    if t.definition is not None and actual.is_generic_definition:
        # A bare instance of a generic class carries no arguments.
        return is_assignable_to_generic(actual, t.definition)[0]
    return False


def accepts(
    param: ParameterDescriptor,
    value: Any,
    catalog: TypeCatalog,
) -> bool:
    if param.is_by_ref and isinstance(value, Ref):
        value = value.value
    if param.is_array:
        return isinstance(value, (list, tuple)) and all(
            accepts_type(param.type, v, catalog) for v in value
        )
    return accepts_type(param.type, value, catalog)


def _coerce(param: ParameterDescriptor, value: Any) -> Any:
    if param.is_by_ref and not isinstance(value, Ref):
        return Ref(value)
    return value


def _take(
    param: ParameterDescriptor,
    pool: list[Any],
    catalog: TypeCatalog,
) -> tuple[bool, Any]:
    for i, value in enumerate(pool):
        if accepts(param, value, catalog):
            del pool[i]
            return True, _coerce(param, value)
    return False, None


def can_bind(
    method: MethodDescriptor,
    supplied: Sequence[Any],
    catalog: TypeCatalog,
) -> bool:
    """Whether *supplied* binds to *method* exactly, with no prompting
    and nothing left over."""
    pool = list(supplied)
    for param in method.parameters:
        found, _ = _take(param, pool, catalog)
        if not found:
            return False
    return not pool


def bind_arguments(
    method: MethodDescriptor,
    supplied: Sequence[Any],
    *,
    catalog: TypeCatalog,
    prompt: Prompt,
) -> BindingResult:
    """Match *supplied* values against the parameters of *method*.

    Parameters are filled left to right, each with the first remaining
    supplied value assignable to it.  A parameter nothing fits is read
    from *prompt* and converted to the parameter type; a conversion
    failure leaves ``None`` in its slot and is reported in
    ``BindingResult.failures`` with a :class:`BindingWarning`.

    Raises:
        BindingError: The user aborted a value prompt.
    """
    pool = list(supplied)
    bound: list[Any] = []
    prompted: list[int] = []
    failures: list[int] = []
    caption = render_signature(method, SignatureStyle.Simple)

    for i, param in enumerate(method.parameters):
        found, value = _take(param, pool, catalog)
        if found:
            bound.append(value)
            continue

        label = param.format(param.type.display_name)
        try:
            text = prompt.read_value(caption, label)
        except PromptAborted as e:
            raise BindingError(
                f"no value supplied for parameter {param.name!r}"
                f" of {method.qualified_name}"
            ) from e
        prompted.append(i)

        try:
            value = cast_text(text, param)
        except CastError as e:
            msg = (
                f"{method.qualified_name}: cannot use {text!r} for"
                f" parameter {param.name!r}: {e}"
            )
            logger.warning("%s", msg)
            warnings.warn(msg, BindingWarning, stacklevel=2)
            value = None
            failures.append(i)
        bound.append(value)

    if pool:
        logger.debug(
            "%s: %d supplied value(s) left unbound",
            method.qualified_name,
            len(pool),
        )

    return BindingResult(
        method=method,
        bound_arguments=tuple(bound),
        closed_generic_parameters=method.generic_arguments,
        prompted=tuple(prompted),
        failures=tuple(failures),
    )


def make_choice_set(candidates: Sequence[MethodDescriptor]) -> ChoiceSet:
    """Numbered choices in declaration order, the last one the default."""
    return ChoiceSet(
        options=tuple(
            Choice(
                label=render_signature(m, SignatureStyle.Simple),
                value=m,
                help_text=m.declaring_type.display_name,
            )
            for m in candidates
        ),
        default_index=len(candidates) - 1,
    )


def choose_overload(
    candidates: Sequence[MethodDescriptor],
    *,
    prompt: Prompt,
    message: str = "More than one overload matches, pick one:",
) -> MethodDescriptor:
    """Ask the user to pick one of *candidates*.

    Raises:
        AmbiguousOverloadError: The user aborted the choice.
    """
    choices = make_choice_set(candidates)
    first = candidates[0]
    caption = f"{first.declaring_type.display_name}.{first.name}"
    try:
        index = prompt.choose(
            caption, message, choices.options, choices.default_index
        )
    except PromptAborted as e:
        signatures = "\n  ".join(c.label for c in choices.options)
        raise AmbiguousOverloadError(
            f"ambiguous call to {caption}, candidates are:\n  {signatures}",
            candidates=candidates,
        ) from e
    if isinstance(index, list):
        index = index[0]
    return candidates[index]


def select_overload(
    candidates: Sequence[MethodDescriptor],
    supplied: Sequence[Any],
    *,
    catalog: TypeCatalog,
    prompt: Prompt,
) -> MethodDescriptor:
    """Pick the overload to call for *supplied*.

    A lone candidate is used as is.  Several are all offered through
    *prompt* in declaration order, the last one the default.

    Raises:
        NotFoundError: *candidates* is empty.
        AmbiguousOverloadError: The user aborted the choice.
    """
    if not candidates:
        raise NotFoundError("no candidate methods to select from")

    if len(candidates) == 1:
        return candidates[0]

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "select_overload: %d candidate(s), exact: %s",
            len(candidates),
            [
                render_signature(m, SignatureStyle.Simple)
                for m in candidates
                if can_bind(m, supplied, catalog)
            ],
        )
    return choose_overload(candidates, prompt=prompt)


def select_and_bind(
    candidates: Sequence[MethodDescriptor],
    supplied: Sequence[Any],
    *,
    catalog: TypeCatalog,
    prompt: Prompt,
    max_attempts: int = 3,
) -> BindingResult:
    """Select an overload and bind it, re-prompting on cast failures."""
    method = select_overload(
        candidates, supplied, catalog=catalog, prompt=prompt
    )
    result = bind_arguments(method, supplied, catalog=catalog, prompt=prompt)

    attempts = 0
    while not result.ok and len(candidates) > 1 and attempts < max_attempts:
        attempts += 1
        logger.warning(
            "%s did not bind (attempt %d of %d), choosing again",
            method.qualified_name,
            attempts,
            max_attempts,
        )
        method = choose_overload(
            candidates,
            prompt=prompt,
            message="The chosen overload did not bind, pick another:",
        )
        result = bind_arguments(
            method, supplied, catalog=catalog, prompt=prompt
        )

    return result
