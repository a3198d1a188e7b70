# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.


import enum


class StrEnum(str, enum.Enum):
    pass


class TypeKind(StrEnum):
    Class = "Class"
    Interface = "Interface"
    GenericParameter = "GenericParameter"
    Special = "Special"


class ParameterKind(StrEnum):
    Positional = "Positional"
    KeywordOnly = "KeywordOnly"
    Variadic = "Variadic"


class SignatureStyle(StrEnum):
    Full = "Full"
    Simple = "Simple"
    ParamBlock = "ParamBlock"


class Visibility(enum.Flag):
    PUBLIC = enum.auto()
    NON_PUBLIC = enum.auto()
    INSTANCE = enum.auto()
    STATIC = enum.auto()
    FORCE = enum.auto()

    DEFAULT = PUBLIC | INSTANCE | STATIC
    ALL = PUBLIC | NON_PUBLIC | INSTANCE | STATIC
