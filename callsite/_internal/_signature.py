# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Textual method signatures for prompts and generated calls."""

from __future__ import annotations
from typing import TYPE_CHECKING

from ._reflection import (
    MethodDescriptor,
    ParameterDescriptor,
    SignatureStyle,
    TypeDescriptor,
)
from ._utils import snake_case

if TYPE_CHECKING:
    from collections.abc import Sequence


PARAM_INDENT = "    "


def _close_over(
    t: TypeDescriptor,
    method: MethodDescriptor,
    generic_args: Sequence[TypeDescriptor] | None,
) -> TypeDescriptor:
    if not generic_args or not t.contains_generic_parameters:
        return t

    if len(method.generic_parameters) == len(generic_args):
        owner = method.generic_parameters
    else:
        definition = method.declaring_type.generic_definition
        owner = definition.generic_parameters if definition else ()
        if len(owner) != len(generic_args):
            # Arity mismatch, leave the placeholder as declared.
            return t

    return t.substitute(dict(zip(owner, generic_args, strict=True)))


def _format_params(
    params: Sequence[tuple[ParameterDescriptor, TypeDescriptor]],
    *,
    qualified: bool,
) -> list[str]:
    return [
        p.format(t.code_name if qualified else t.display_name)
        for p, t in params
    ]


def _param_block(
    params: Sequence[tuple[ParameterDescriptor, TypeDescriptor]],
) -> str:
    lines = []
    star_emitted = False
    for p, t in params:
        if p.is_variadic:
            star_emitted = True
        elif p.is_keyword_only and not star_emitted:
            lines.append(f"{PARAM_INDENT}*,")
            star_emitted = True
        lines.append(f"{PARAM_INDENT}{p.format(t.code_name)},")
    return "\n".join(lines)


def render_signature(
    method: MethodDescriptor,
    style: SignatureStyle = SignatureStyle.Full,
    generic_args: Sequence[TypeDescriptor] | None = None,
) -> str:
    """Render *method* as text.

    ``Full`` is call syntax (``Box(value: int)``, ``Box.create(...)``,
    ``box.get(...)``), ``Simple`` is ``name(params) -> return`` and
    ``ParamBlock`` is a parameter list with one parameter per line.

    If *generic_args* is given, open generic placeholders in parameter
    and return types are closed over it, using the method's own generic
    parameters or, failing that, its declaring type's.
    """
    params = [
        (p, _close_over(p.type, method, generic_args))
        for p in method.parameters
    ]

    if style is SignatureStyle.ParamBlock:
        return _param_block(params)

    elif style is SignatureStyle.Simple:
        args = ", ".join(_format_params(params, qualified=False))
        ret = _close_over(method.return_type, method, generic_args)
        return f"{method.name}({args}) -> {ret.display_name}"

    elif style is SignatureStyle.Full:
        args = ", ".join(_format_params(params, qualified=True))
        declaring = method.declaring_type.display_name
        if method.is_constructor:
            callee = declaring
        elif method.is_static:
            callee = f"{declaring}.{method.name}"
        else:
            callee = f"{snake_case(method.declaring_type.name)}.{method.name}"
        return f"{callee}({args})"

    else:
        raise ValueError(f"unsupported signature style: {style!r}")
