# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Turn parameter and return annotations into runtime type objects."""

from typing import (
    Any,
    Literal,
    Mapping,
    Union,
)
from typing_extensions import (
    Annotated,
    ForwardRef,
)

from typing_extensions import evaluate_forward_ref  # type: ignore [attr-defined]

import sys
import typing

from . import _typing_inspect


_CALLABLE_ORIGIN = typing.get_origin(typing.Callable[..., Any])

Namespace = Mapping[str, Any] | None


def _alias_target(alias: Any) -> Any:
    target = alias.__value__
    if not isinstance(target, str):
        return target
    module = sys.modules.get(alias.__module__) if alias.__module__ else None
    module_ns = module.__dict__ if module is not None else {}
    return resolve_annotation(ForwardRef(target), globals=module_ns)


def _join_union(args: tuple[Any, ...], ns: Namespace, localns: Namespace) -> Any:
    members = [resolve_annotation(a, globals=ns, locals=localns) for a in args]
    joined = members[0]
    for member in members[1:]:
        joined |= member
    return joined


def _resolve_alias_args(value: Any, ns: Namespace, localns: Namespace) -> Any:
    args = typing.get_args(value)
    resolved = tuple(
        arg
        if arg is ... or _typing_inspect.is_type_var(arg)
        else resolve_annotation(arg, globals=ns, locals=localns)
        for arg in args
    )
    if resolved == args:
        return value
    return value.__origin__[resolved]


def resolve_annotation(
    value: Any,
    *,
    globals: Namespace = None,
    locals: Namespace = None,
) -> Any:
    """Evaluate *value* into something the binder can check against.

    Strings and forward references are evaluated in *globals*/*locals*.
    Type aliases are unwrapped and ``Annotated`` metadata is dropped.
    ``Union[...]`` is rebuilt as ``X | Y``. Literals, ``Callable[...]``
    and placeholders come back untouched.
    """
    if isinstance(value, str):
        value = ForwardRef(value)
    if _typing_inspect.is_forward_ref(value):
        value = evaluate_forward_ref(value, globals=globals, locals=locals)

    if _typing_inspect.is_type_alias(value):
        return resolve_annotation(_alias_target(value))

    if not _typing_inspect.is_generic_alias(value):
        return value

    origin = typing.get_origin(value)
    if origin is Annotated:
        return resolve_annotation(
            typing.get_args(value)[0], globals=globals, locals=locals
        )
    if origin is Literal or origin is _CALLABLE_ORIGIN:
        return value
    if origin is Union:
        return _join_union(typing.get_args(value), globals, locals)
    return _resolve_alias_args(value, globals, locals)


def try_resolve_annotation(
    value: Any,
    *,
    globals: Namespace = None,
    locals: Namespace = None,
) -> Any:
    """Like :func:`resolve_annotation`, but ``None`` for unknown names."""
    try:
        return resolve_annotation(value, globals=globals, locals=locals)
    except NameError:
        return None
