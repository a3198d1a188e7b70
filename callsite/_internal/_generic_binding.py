# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Generic method selection, type-argument inference and invocation."""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

import collections.abc
import inspect
import logging
import typing

from callsite.errors import GenericInferenceError

from . import _typing_inspect
from ._invoke import invoke_method
from ._markers import Ref
from ._members import CONSTRUCTOR_NAMES, find_methods
from ._reflection import SignatureStyle, TypeDescriptor, Visibility
from ._signature import render_signature

if TYPE_CHECKING:
    from collections.abc import Sequence
    from ._reflection import (
        MethodDescriptor,
        ParameterDescriptor,
        TypeCatalog,
    )


logger = logging.getLogger(__name__)


def unwrap_value(value: Any) -> Any:
    """Follow ``__wrapped__`` to the underlying object."""
    try:
        return inspect.unwrap(value)
    except ValueError:
        # cycle
        return value


def target_type(target: Any, catalog: TypeCatalog) -> TypeDescriptor:
    if isinstance(target, TypeDescriptor):
        return target
    elif isinstance(target, type) or hasattr(target, "__origin__"):
        return catalog.describe(target)
    else:
        return catalog.type_of(target)


def infer_argument_types(
    values: Sequence[Any],
    catalog: TypeCatalog,
) -> list[TypeDescriptor]:
    return [catalog.type_of(v) for v in values]


def infer_element_types(
    values: Sequence[Any],
    catalog: TypeCatalog,
) -> list[TypeDescriptor | None]:
    """Cell types of ``Ref`` values and element types of sequences.

    Mixed sequences give ``object``; empty ones and scalars ``None``.
    """
    result: list[TypeDescriptor | None] = []
    for v in values:
        if isinstance(v, Ref):
            result.append(catalog.type_of(v.value))
        elif isinstance(v, (list, tuple)) and v:
            kinds = {catalog.type_of(e) for e in v}
            if len(kinds) == 1:
                result.append(kinds.pop())
            else:
                result.append(catalog.describe(object))
        else:
            result.append(None)
    return result


def explicit_element_type(
    annotation: Any,
    catalog: TypeCatalog,
) -> TypeDescriptor | None:
    """The element type named by ``Ref[X]``, ``list[X]`` and the like."""
    if isinstance(annotation, TypeDescriptor):
        root = annotation.definition
        if root is not None and root.py_type is Ref:
            return annotation.generic_parameters[0]
        return None
    if typing.get_origin(annotation) is Ref or (
        _typing_inspect.is_homogeneous_sequence(annotation)
    ):
        return catalog.describe(typing.get_args(annotation)[0])
    return None


def _root_type(t: TypeDescriptor) -> Any:
    return (t.generic_definition or t).py_type


def _is_sequence_type(t: TypeDescriptor) -> bool:
    root = _root_type(t)
    return (
        isinstance(root, type)
        and issubclass(root, collections.abc.Sequence)
        and not issubclass(root, (str, bytes, bytearray))
    )


def _argument_type(
    param: ParameterDescriptor,
    supplied: TypeDescriptor,
    element: TypeDescriptor | None,
) -> tuple[bool, TypeDescriptor | None]:
    """What ``param.type`` is matched against for one argument.

    The first item is False when the container does not fit the
    parameter; the second is ``None`` when the element type is unknown.
    """
    if param.is_by_ref and _root_type(supplied) is Ref:
        return True, element
    if param.is_array:
        if _is_sequence_type(supplied):
            return True, element
        # a single value for *args
        return param.is_variadic, supplied
    return True, supplied


def _shape(
    types: Sequence[TypeDescriptor],
    elements: Sequence[TypeDescriptor | None] | None,
) -> Sequence[TypeDescriptor | None]:
    if elements is None:
        return [None] * len(types)
    if len(elements) != len(types):
        raise ValueError(
            f"{len(types)} argument type(s), {len(elements)} element type(s)"
        )
    return elements


def select_kind(
    methods: Sequence[MethodDescriptor],
    method_name: str,
    is_static: bool,
) -> list[MethodDescriptor]:
    if method_name.lower() in CONSTRUCTOR_NAMES:
        return [m for m in methods if m.is_constructor]
    return [
        m
        for m in methods
        if not m.is_constructor and m.is_static == is_static
    ]


def _exact_match(
    methods: Sequence[MethodDescriptor],
    types: Sequence[TypeDescriptor],
    elements: Sequence[TypeDescriptor | None],
) -> MethodDescriptor | None:
    for m in methods:
        if m.is_generic or len(m.parameters) != len(types):
            continue
        for p, t, e in zip(m.parameters, types, elements, strict=True):
            fits, actual = _argument_type(p, t, e)
            if not fits or (actual is not None and p.type != actual):
                break
        else:
            return m
    return None


def infer_generic_arguments(
    method: MethodDescriptor,
    types: Sequence[TypeDescriptor],
    elements: Sequence[TypeDescriptor | None] | None = None,
) -> tuple[TypeDescriptor, ...] | None:
    """Type arguments for *method* from the types at its generic slots.

    *elements* gives the element type of each sequence argument and the
    cell type of each ``Ref`` argument, see :func:`infer_element_types`;
    array and by-ref slots are inferred from those.

    Returns ``None`` if the shape does not fit, two slots disagree about
    one parameter, a parameter has no slot or a bound is violated.
    """
    if len(method.parameters) != len(types):
        return None

    slots = set(method.generic_slots)
    mapping: dict[TypeDescriptor, TypeDescriptor] = {}
    for i, (param, supplied, element) in enumerate(
        zip(method.parameters, types, _shape(types, elements), strict=True)
    ):
        fits, actual = _argument_type(param, supplied, element)
        if not fits:
            return None
        if i not in slots:
            if actual is not None and param.type != actual:
                return None
            continue
        if actual is None:
            # empty sequence, another slot has to supply the type
            continue
        bound = mapping.setdefault(param.type, actual)
        if bound != actual:
            logger.debug(
                "%s: conflicting types for %s: %s and %s",
                method.qualified_name,
                param.type.name,
                bound.display_name,
                actual.display_name,
            )
            return None

    args = []
    for gp in method.generic_parameters:
        arg = mapping.get(gp)
        if arg is None:
            return None
        if gp.constraint is not None and not gp.constraint.is_assignable_from(
            arg
        ):
            return None
        args.append(arg)
    return tuple(args)


def resolve_generic(
    candidates: Sequence[MethodDescriptor],
    types: Sequence[TypeDescriptor],
    elements: Sequence[TypeDescriptor | None] | None = None,
) -> MethodDescriptor | None:
    """Pick and close the best candidate for *types*.

    An exact non-generic match wins outright; otherwise the accepted
    candidate with the fewest generic parameters, the first declared on
    ties.
    """
    elements = _shape(types, elements)
    exact = _exact_match(candidates, types, elements)
    if exact is not None:
        return exact

    best: tuple[MethodDescriptor, tuple[TypeDescriptor, ...]] | None = None
    for m in candidates:
        args = infer_generic_arguments(m, types, elements)
        if args is None:
            continue
        if best is None or len(m.generic_parameters) < len(
            best[0].generic_parameters
        ):
            best = (m, args)

    if best is None:
        return None
    method, args = best
    return method.make_generic(*args) if method.is_generic else method


def wrap_by_ref(
    method: MethodDescriptor,
    values: Sequence[Any],
) -> list[Any]:
    """Box plain values passed to by-ref parameters in a ``Ref``."""
    return [
        Ref(v) if p.is_by_ref and not isinstance(v, Ref) else v
        for p, v in zip(method.parameters, values, strict=True)
    ]


def invoke_generic(
    target: Any,
    method_name: str,
    args: Sequence[Any],
    explicit_param_types: Sequence[Any] | None = None,
    *,
    is_static: bool = False,
    catalog: TypeCatalog,
) -> Any:
    """Find, close and call the best *method_name* overload for *args*.

    Args:
        target: Instance, class or type descriptor to call on.
        method_name: Method name; ``new`` or ``__init__`` constructs.
        args: Argument values, unwrapped through ``__wrapped__``.
        explicit_param_types: Parameter types to match against instead
            of the runtime types of *args* (classes, annotations or
            descriptors).
        is_static: Look among static rather than instance methods.
        catalog: Where types are described.

    Raises:
        GenericInferenceError: No candidate fits the argument types.
        InvocationError: The selected method raised.
    """
    values = [unwrap_value(a) for a in args]
    t = target_type(target, catalog)

    if explicit_param_types is None:
        types = infer_argument_types(values, catalog)
        elements = infer_element_types(values, catalog)
    else:
        types = [
            p if isinstance(p, TypeDescriptor) else catalog.describe(p)
            for p in explicit_param_types
        ]
        elements = [
            explicit_element_type(p, catalog) for p in explicit_param_types
        ]

    candidates = select_kind(
        find_methods(t, method_name, Visibility.ALL, no_warn=True),
        method_name,
        is_static,
    )
    method = resolve_generic(candidates, types, elements)
    if method is None:
        signatures = "\n  ".join(
            render_signature(m, SignatureStyle.Simple) for m in candidates
        )
        arg_types = ", ".join(ty.display_name for ty in types)
        raise GenericInferenceError(
            f"cannot find method {t.display_name}.{method_name} matching"
            f" ({arg_types})"
            + (f", candidates are:\n  {signatures}" if candidates else ""),
            type_name=t.full_name,
            member_name=method_name,
            candidates=candidates,
        )

    logger.debug(
        "invoke_generic: %s",
        render_signature(method, SignatureStyle.Simple),
    )
    return invoke_method(method, target, wrap_by_ref(method, values))
