# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Runtime ``isinstance``/``issubclass`` over type hints.

These mirror the checks a static type checker performs on a call site
but work on live values, which is what the argument binder needs when a
parameter is backed by a real Python annotation.  Containers are checked
by sampling their first element.
"""

from typing import (
    Any,
    TypeVar,
)
from collections.abc import (
    Collection,
    Mapping,
)

import typing

from . import _typing_eval
from . import _typing_inspect
from ._utils import module_ns_of, type_repr


def resolve_to_bound(tp: Any) -> Any:
    if isinstance(tp, TypeVar):
        bound = tp.__bound__
        if bound is None:
            return Any
        tp = _typing_eval.resolve_annotation(bound, globals=module_ns_of(tp))

    return tp


def issubclass_of(lhs: Any, tp: Any) -> bool:
    if tp is Any or tp is object:
        return True

    if isinstance(tp, TypeVar):
        return issubclass_of(lhs, resolve_to_bound(tp))

    if _typing_inspect.is_union_type(tp):
        return any(issubclass_of(lhs, el) for el in typing.get_args(tp))

    if _typing_inspect.is_generic_alias(lhs):
        lhs = typing.get_origin(lhs)

    if _typing_inspect.is_generic_alias(tp):
        # Generic arguments are erased at runtime, so only the
        # origin can be compared.
        tp = typing.get_origin(tp)

    if not isinstance(lhs, type) or not isinstance(tp, type):
        return False

    return issubclass(lhs, tp)


def isinstance_of(obj: Any, tp: Any) -> bool:
    # Handle Any type - matches everything
    if tp is Any:
        return True

    # Handle basic types
    if _typing_inspect.is_valid_isinstance_arg(tp):
        return isinstance(obj, tp)

    elif _typing_inspect.is_union_type(tp):
        return any(isinstance_of(obj, el) for el in typing.get_args(tp))

    elif _typing_inspect.is_literal(tp):
        # For Literal types, check if obj is one of the literal values
        return obj in typing.get_args(tp)

    elif _typing_inspect.is_generic_alias(tp):
        origin = typing.get_origin(tp)
        args = typing.get_args(tp)
        if origin is type:
            atype = resolve_to_bound(args[0])

            if isinstance(obj, type):
                return issubclass_of(obj, atype)
            # NB: This is to handle the case where obj is something
            # like a generic alias, where it has some fictitious
            # associated type that isn't really its runtime type.
            elif (mroent := getattr(obj, "__mro_entries__", None)) is not None:
                genalias_mro = mroent((obj,))
                return any(issubclass_of(c, atype) for c in genalias_mro)
            else:
                return False

        elif origin is typing.get_origin(typing.Callable[..., Any]):
            return callable(obj)

        elif not isinstance(origin, type):  # pragma: no cover
            raise TypeError(
                "isinstance_of() argument 2 contains a generic with non-type "
                "origin"
            )

        elif issubclass(origin, Mapping):
            # Check the container type first
            if not isinstance(obj, origin):
                return False

            # If no type args or empty mapping, we're done
            if not args or len(obj) == 0:
                return True

            if len(args) != 2:
                raise TypeError(
                    f"isinstance_of() argument 2 contains improperly typed "
                    f"{type_repr(origin)} generic"
                )

            # For Mapping[K, V], check first key and first value
            k, v = next(iter(obj.items()))
            return isinstance_of(k, args[0]) and isinstance_of(v, args[1])

        elif issubclass(origin, tuple):
            # Check the container type first
            if not isinstance(obj, origin):
                return False

            num_args = len(args)
            num_elems = len(obj)

            # If no type args or empty container, we're done
            if num_args == 0 or num_elems == 0:
                return True

            # Tuples can be homogeneous tuple[T, ...] or
            # heterogeneous tuple[*T]
            if num_args == 2 and args[1] is ...:
                # Homogeneous tuple like tuple[int, ...]
                return isinstance_of(next(iter(obj)), args[0])
            elif num_args != num_elems:
                # Shape of tuple value does not match type definition
                return False
            else:
                for el_type, el_val in zip(args, obj, strict=True):
                    if not isinstance_of(el_val, el_type):
                        return False
                return True

        elif issubclass(origin, Collection):
            # Check the container type first
            if not isinstance(obj, origin):
                return False

            # If no type args or empty container, we're done
            if not args or len(obj) == 0:
                return True

            return isinstance_of(next(iter(obj)), args[0])

        else:
            # For other generic types, fall back to checking the origin
            return isinstance(obj, origin)

    elif isinstance(tp, TypeVar):
        return isinstance_of(obj, resolve_to_bound(tp))

    else:
        raise TypeError(f"isinstance_of() argument 2 is {tp!r}")
