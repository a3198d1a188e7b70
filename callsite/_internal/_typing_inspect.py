# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.


from typing import (
    Annotated,
    Any,
    ForwardRef,
    Generic,
    Literal,
    Protocol,
    TypeGuard,
    TypeVar,
    Union,
    get_args,
    get_origin,
)
from typing import _GenericAlias, _SpecialGenericAlias  # type: ignore [attr-defined]  # noqa: PLC2701
from typing_extensions import TypeAliasType
from types import GenericAlias, UnionType

import abc
import collections.abc


def is_generic_alias(t: Any) -> TypeGuard[GenericAlias]:
    return isinstance(t, (GenericAlias, _GenericAlias, _SpecialGenericAlias))


def is_type_alias(t: Any) -> TypeGuard[TypeAliasType]:
    return isinstance(t, TypeAliasType)


def is_annotated(t: Any) -> TypeGuard[Annotated[Any, ...]]:
    return is_generic_alias(t) and get_origin(t) is Annotated  # type: ignore [comparison-overlap]


def is_forward_ref(t: Any) -> TypeGuard[ForwardRef]:
    return isinstance(t, ForwardRef)


def is_type_var(t: Any) -> TypeGuard[TypeVar]:
    return isinstance(t, TypeVar)


def is_union_type(t: Any) -> bool:
    return (
        (is_generic_alias(t) and get_origin(t) is Union)  # type: ignore [comparison-overlap]
        or isinstance(t, UnionType)
    )


def is_literal(t: Any) -> bool:
    return is_generic_alias(t) and get_origin(t) is Literal  # type: ignore [comparison-overlap]


def is_valid_isinstance_arg(t: Any) -> bool:
    return isinstance(t, type) and not is_generic_alias(t)


def is_generic_marker(t: Any) -> bool:
    """True for the ``Generic``/``Protocol`` bases that carry no shape."""
    return t is Generic or t is Protocol or t is object


def is_interface(t: Any) -> bool:
    """True for classes treated as interfaces: protocols and direct ABCs."""
    if not isinstance(t, type):
        return False
    return bool(getattr(t, "_is_protocol", False)) or abc.ABC in t.__bases__


def is_homogeneous_sequence(t: Any) -> bool:
    """True for ``list[T]``, ``Sequence[T]`` and ``tuple[T, ...]``."""
    if not is_generic_alias(t):
        return False
    origin = get_origin(t)
    args = get_args(t)
    if origin is tuple:
        return len(args) == 2 and args[1] is ...
    return origin in {list, collections.abc.Sequence} and len(args) == 1


def is_callable_alias(t: Any) -> bool:
    return is_generic_alias(t) and get_origin(t) is collections.abc.Callable
