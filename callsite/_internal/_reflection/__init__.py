# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

from ._enums import (
    ParameterKind,
    SignatureStyle,
    TypeKind,
    Visibility,
)

from ._base import (
    Descriptor,
    QualName,
    parse_name,
)

from ._types import (
    TypeDescriptor,
    is_generic_parameter,
    make_generic_parameter,
)

from ._callables import (
    AttributeDescriptor,
    MethodDescriptor,
    ParameterDescriptor,
    SignatureKey,
)

from ._catalog import (
    TypeCatalog,
    get_modules_by_pattern,
)

__all__ = (
    "AttributeDescriptor",
    "Descriptor",
    "MethodDescriptor",
    "ParameterDescriptor",
    "ParameterKind",
    "QualName",
    "SignatureKey",
    "SignatureStyle",
    "TypeCatalog",
    "TypeDescriptor",
    "TypeKind",
    "Visibility",
    "get_modules_by_pattern",
    "is_generic_parameter",
    "make_generic_parameter",
    "parse_name",
)
