# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Conversion of prompted text into parameter values."""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

import ast
import functools

import pydantic

from . import _typing_check
from . import _typing_inspect
from ._markers import Ref

if TYPE_CHECKING:
    from ._reflection import ParameterDescriptor, TypeDescriptor


class CastError(ValueError):
    pass


@functools.lru_cache(maxsize=256)
def _adapter(tp: Any) -> pydantic.TypeAdapter[Any]:
    try:
        return pydantic.TypeAdapter(
            tp, config=pydantic.ConfigDict(arbitrary_types_allowed=True)
        )
    except pydantic.PydanticUserError:
        # Models and pydantic dataclasses carry their own config.
        return pydantic.TypeAdapter(tp)


def _get_adapter(tp: Any) -> pydantic.TypeAdapter[Any]:
    try:
        return _adapter(tp)
    except TypeError:
        # unhashable annotation
        return _adapter.__wrapped__(tp)


def parse_text(text: str) -> Any:
    """Interpret one line of prompted input.

    Text wrapped in braces is evaluated as a Python literal expression
    (``{[1, 2]}`` is a list, ``{1, 2}`` a tuple).  Anything else is
    returned as the stripped string.
    """
    stripped = text.strip()
    if len(stripped) >= 2 and stripped[0] == "{" and stripped[-1] == "}":
        try:
            return ast.literal_eval(stripped[1:-1].strip())
        except (ValueError, SyntaxError) as e:
            raise CastError(f"not a literal expression: {stripped}") from e
    return stripped


def annotation_of(t: TypeDescriptor) -> Any:
    """The Python annotation a value of *t* is validated against."""
    if t.is_generic_parameter:
        if t.constraint is not None:
            return annotation_of(t.constraint)
        return Any
    if t.is_object:
        return Any
    py_type = t.py_type
    if _typing_inspect.is_type_var(py_type):
        return _typing_check.resolve_to_bound(py_type)
    return py_type


def cast_value(value: Any, param: ParameterDescriptor) -> Any:
    """Validate *value* in lax mode against *param*'s declared type."""
    tp = annotation_of(param.type)
    if tp is None:
        raise CastError(
            f"no Python type backs {param.type.display_name!r}"
        )
    if param.is_array:
        tp = list[tp]  # type: ignore [valid-type]

    if isinstance(value, Ref):
        value = value.value

    try:
        result = _get_adapter(tp).validate_python(value, strict=False)
    except (pydantic.ValidationError, pydantic.PydanticSchemaGenerationError) as e:
        raise CastError(
            f"cannot convert {value!r} to {param.type.display_name}"
        ) from e

    if param.is_by_ref:
        result = Ref(result)
    return result


def cast_text(text: str, param: ParameterDescriptor) -> Any:
    return cast_value(parse_text(text), param)
