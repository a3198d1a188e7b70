# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Exceptions and warnings raised while resolving a call site."""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence


__all__ = (
    "AmbiguousOverloadError",
    "BindingError",
    "BindingWarning",
    "CallsiteError",
    "CallsiteWarning",
    "GenericInferenceError",
    "InvocationError",
    "NotFoundError",
    "PromptAborted",
    "TypeHierarchyError",
)


class CallsiteError(Exception):
    pass


class NotFoundError(CallsiteError, LookupError):
    def __init__(
        self,
        message: str,
        *,
        type_name: str | None = None,
        member_name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.type_name = type_name
        self.member_name = member_name


class GenericInferenceError(NotFoundError):
    def __init__(
        self,
        message: str,
        *,
        type_name: str | None = None,
        member_name: str | None = None,
        candidates: Sequence[Any] = (),
    ) -> None:
        super().__init__(
            message, type_name=type_name, member_name=member_name
        )
        self.candidates = tuple(candidates)


class AmbiguousOverloadError(CallsiteError):
    def __init__(self, message: str, *, candidates: Sequence[Any]) -> None:
        super().__init__(message)
        self.candidates = tuple(candidates)


class BindingError(CallsiteError):
    pass


class InvocationError(CallsiteError):
    def __init__(
        self,
        message: str,
        *,
        method: Any,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.cause = cause


class TypeHierarchyError(CallsiteError):
    pass


class PromptAborted(CallsiteError):
    """The user closed the input stream or interrupted a prompt."""


class CallsiteWarning(UserWarning):
    pass


class BindingWarning(CallsiteWarning):
    pass
