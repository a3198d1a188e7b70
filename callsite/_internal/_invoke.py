# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Calling a resolved method."""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

import inspect
import logging

from callsite.errors import InvocationError

from ._reflection import SignatureStyle, TypeDescriptor
from ._signature import render_signature

if TYPE_CHECKING:
    from collections.abc import Sequence
    from ._reflection import MethodDescriptor


logger = logging.getLogger(__name__)


def _call_arguments(
    method: MethodDescriptor,
    arguments: Sequence[Any],
) -> tuple[list[Any], dict[str, Any]]:
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    for param, value in zip(method.parameters, arguments, strict=True):
        if param.is_keyword_only:
            kwargs[param.name] = value
        elif param.is_variadic:
            if isinstance(value, (list, tuple)):
                args.extend(value)
            elif value is not None:
                args.append(value)
        else:
            args.append(value)
    return args, kwargs


def invoke_method(
    method: MethodDescriptor,
    target: Any,
    arguments: Sequence[Any],
) -> Any:
    """Call *method* on *target* with *arguments*, one per parameter.

    Constructors call the class, static and class methods call the
    stored callable and instance methods are called with *target* as
    ``self``.

    Raises:
        InvocationError: The arguments do not fit the callable, or the
            call itself raised.
    """
    signature = render_signature(method, SignatureStyle.Full)
    impl = method.impl
    if impl is None:
        raise InvocationError(
            f"{signature} has no implementation to call", method=method
        )

    if len(arguments) != len(method.parameters):
        raise InvocationError(
            f"{signature}: argument count/type mismatch: expected"
            f" {len(method.parameters)} argument(s), got {len(arguments)}",
            method=method,
        )

    args, kwargs = _call_arguments(method, arguments)
    if method.is_constructor or (method.is_static and not method.is_classmethod):
        bound_self: tuple[Any, ...] = ()
    elif method.is_classmethod:
        if isinstance(target, type):
            owner = target
        elif isinstance(target, TypeDescriptor):
            owner = (target.generic_definition or target).py_type
        else:
            owner = type(target)
        bound_self = (owner,)
    else:
        bound_self = (target,)

    try:
        inspect.signature(impl).bind(*bound_self, *args, **kwargs)
    except TypeError as e:
        raise InvocationError(
            f"{signature}: argument count/type mismatch: {e}",
            method=method,
            cause=e,
        ) from e
    except ValueError:
        # No signature available (builtins), let the call decide.
        pass

    call = impl
    declaring = method.declaring_type
    if (
        method.is_constructor
        and declaring.definition is not None
        and declaring.py_type is not None
    ):
        # Box[str](...) records its arguments on the instance.
        call = declaring.py_type

    logger.debug("invoking %s", signature)
    try:
        return call(*bound_self, *args, **kwargs)
    except Exception as e:
        raise InvocationError(
            f"{signature} raised {type(e).__name__}: {e}",
            method=method,
            cause=e,
        ) from e
