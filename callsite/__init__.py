# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Runtime method resolution and invocation with interactive fallback."""

from callsite._internal._aliases import AliasRegistry
from callsite._internal._assignability import is_assignable_to_generic
from callsite._internal._binding import (
    BindingResult,
    bind_arguments,
    select_overload,
)
from callsite._internal._config import EngineConfig
from callsite._internal._generic_binding import invoke_generic
from callsite._internal._invoke import invoke_method
from callsite._internal._markers import Ref, attributes
from callsite._internal._members import find_methods
from callsite._internal._prompt import (
    Choice,
    ChoiceSet,
    ConsolePrompt,
    Prompt,
    ScriptedPrompt,
)
from callsite._internal._reflection import (
    AttributeDescriptor,
    MethodDescriptor,
    ParameterDescriptor,
    ParameterKind,
    SignatureStyle,
    TypeCatalog,
    TypeDescriptor,
    TypeKind,
    Visibility,
    get_modules_by_pattern,
)
from callsite._internal._session import Session
from callsite._internal._signature import render_signature

from callsite.errors import (
    AmbiguousOverloadError,
    BindingError,
    BindingWarning,
    CallsiteError,
    CallsiteWarning,
    GenericInferenceError,
    InvocationError,
    NotFoundError,
    PromptAborted,
    TypeHierarchyError,
)

__version__ = "0.1.0"

__all__ = (
    "AliasRegistry",
    "AmbiguousOverloadError",
    "AttributeDescriptor",
    "BindingError",
    "BindingResult",
    "BindingWarning",
    "CallsiteError",
    "CallsiteWarning",
    "Choice",
    "ChoiceSet",
    "ConsolePrompt",
    "EngineConfig",
    "GenericInferenceError",
    "InvocationError",
    "MethodDescriptor",
    "NotFoundError",
    "ParameterDescriptor",
    "ParameterKind",
    "Prompt",
    "PromptAborted",
    "Ref",
    "ScriptedPrompt",
    "Session",
    "SignatureStyle",
    "TypeCatalog",
    "TypeDescriptor",
    "TypeHierarchyError",
    "TypeKind",
    "Visibility",
    "attributes",
    "bind_arguments",
    "find_methods",
    "get_modules_by_pattern",
    "invoke_generic",
    "invoke_method",
    "is_assignable_to_generic",
    "render_signature",
    "select_overload",
)
