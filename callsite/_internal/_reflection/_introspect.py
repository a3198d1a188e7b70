# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Build type descriptors from live Python classes.

Classes are read once into :class:`TypeDescriptor` snapshots:

* the first concrete base becomes ``base``; protocols, direct ABCs and
  any further concrete bases become interfaces;
* ``TypeVar`` parameters of the class become placeholders owned by the
  class, and parametrized bases (``IContainer[T]``) become constructed
  generics over those placeholders;
* ``__init__``, plain functions, static and class methods, each
  ``typing.overload`` variant and property accessors become
  :class:`MethodDescriptor` objects, in declaration order.
"""

from __future__ import annotations
from typing import (
    TYPE_CHECKING,
    Any,
    TypeVar,
)
from typing_extensions import get_overloads

import inspect
import logging
import typing

from callsite._internal import _markers
from callsite._internal import _typing_check
from callsite._internal import _typing_eval
from callsite._internal import _typing_inspect
from callsite._internal._utils import module_ns_of, type_repr

from ._base import set_frozen
from ._callables import (
    AttributeDescriptor,
    MethodDescriptor,
    ParameterDescriptor,
)
from ._enums import ParameterKind, TypeKind
from ._types import TypeDescriptor, make_generic_parameter

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping


logger = logging.getLogger(__name__)

Scope = dict[TypeVar, TypeDescriptor]

_BUILTIN_MARKERS = (
    ("__isabstractmethod__", "abstractmethod", "abc.abstractmethod"),
    ("__final__", "final", "typing.final"),
    ("__deprecated__", "deprecated", "warnings.deprecated"),
)

_MACHINERY_MODULES = frozenset({"typing", "typing_extensions", "abc"})

_OVERLOAD_ATTR = AttributeDescriptor(
    name="overload", full_name="typing.overload"
)


def _iter_type_vars(annotation: Any) -> Iterator[TypeVar]:
    if isinstance(annotation, TypeVar):
        yield annotation
    else:
        for arg in typing.get_args(annotation):
            if isinstance(arg, (list, tuple)):
                for a in arg:
                    yield from _iter_type_vars(a)
            else:
                yield from _iter_type_vars(arg)


def _marker_descriptor(marker: Any) -> AttributeDescriptor:
    if isinstance(marker, str):
        return AttributeDescriptor(name=marker, full_name=marker)
    cls = marker if isinstance(marker, type) else type(marker)
    return AttributeDescriptor(name=cls.__name__, full_name=type_repr(cls))


def _method_attributes(*fns: Any) -> tuple[AttributeDescriptor, ...]:
    result: dict[str, AttributeDescriptor] = {}
    for fn in fns:
        for marker in getattr(fn, _markers.ATTRIBUTES_ATTR, ()):
            attr = _marker_descriptor(marker)
            result.setdefault(attr.full_name, attr)
        for dunder, name, full_name in _BUILTIN_MARKERS:
            if getattr(fn, dunder, False):
                result.setdefault(
                    full_name,
                    AttributeDescriptor(name=name, full_name=full_name),
                )
    return tuple(result.values())


def _is_public(name: str) -> bool:
    return name == "__init__" or not name.startswith("_")


class Introspector:
    """Lazily describes Python annotations, caching per runtime type.

    *lookup* is consulted by full name before a class is introspected,
    so explicitly registered descriptors win over derived ones.
    """

    def __init__(
        self,
        lookup: Callable[[str], TypeDescriptor | None],
    ) -> None:
        self._lookup = lookup
        self._cache: dict[Any, TypeDescriptor] = {}

    def clear(self) -> None:
        self._cache.clear()

    def describe(
        self,
        annotation: Any,
        scope: Mapping[TypeVar, TypeDescriptor] | None = None,
    ) -> TypeDescriptor:
        if scope is None:
            scope = {}

        tp = annotation
        if tp is None:
            tp = type(None)
        elif tp is Any or tp is inspect.Parameter.empty:
            tp = object

        if isinstance(tp, TypeVar):
            placeholder = scope.get(tp)
            if placeholder is None:
                placeholder = self._free_type_var(tp)
            return placeholder

        if (
            _typing_inspect.is_union_type(tp)
            or _typing_inspect.is_literal(tp)
            or _typing_inspect.is_annotated(tp)
            or _typing_inspect.is_callable_alias(tp)
        ):
            if _typing_inspect.is_annotated(tp):
                return self.describe(typing.get_args(tp)[0], scope)
            return self._describe_special(tp, scope)

        if _typing_inspect.is_generic_alias(tp):
            origin = typing.get_origin(tp)
            args = typing.get_args(tp)
            if isinstance(origin, type):
                definition = self.describe(origin)
                if definition.is_generic_definition and len(args) == len(
                    definition.generic_parameters
                ):
                    return definition.make_generic(
                        *(self.describe(a, scope) for a in args)
                    )
                # Builtin containers are not modelled as generics; their
                # arguments are erased.
                return definition
            return self._describe_special(tp, scope)

        if isinstance(tp, type):
            return self._describe_class(tp)

        return self._describe_special(tp, scope)

    def _free_type_var(self, tv: TypeVar) -> TypeDescriptor:
        cached = self._cache.get(tv)
        if cached is not None:
            return cached
        placeholder = make_generic_parameter(
            tv.__name__,
            owner=getattr(tv, "__module__", None) or "typing",
            position=0,
            py_type=tv,
        )
        self._cache[tv] = placeholder
        if tv.__bound__ is not None:
            set_frozen(
                placeholder,
                constraint=self.describe(_typing_check.resolve_to_bound(tv)),
            )
        return placeholder

    def _describe_special(
        self,
        tp: Any,
        scope: Mapping[TypeVar, TypeDescriptor],
    ) -> TypeDescriptor:
        try:
            cached = self._cache.get(tp)
        except TypeError:
            cached = None
        if cached is not None:
            return cached

        if _typing_inspect.is_union_type(tp):
            name = " | ".join(
                self.describe(a, scope).display_name
                for a in typing.get_args(tp)
            )
        else:
            name = repr(tp).replace("typing.", "")

        desc = TypeDescriptor(
            namespace="",
            name=name,
            kind=TypeKind.Special,
            base=self.describe(object),
            py_type=tp,
        )
        try:
            self._cache[tp] = desc
        except TypeError:
            pass
        return desc

    def _describe_class(self, cls: type) -> TypeDescriptor:
        cached = self._cache.get(cls)
        if cached is not None:
            return cached

        registered = self._lookup(f"{cls.__module__}.{cls.__qualname__}")
        if registered is not None:
            self._cache[cls] = registered
            return registered

        kind = (
            TypeKind.Interface
            if _typing_inspect.is_interface(cls)
            else TypeKind.Class
        )
        desc = TypeDescriptor(
            namespace=cls.__module__,
            name=cls.__qualname__,
            kind=kind,
            py_type=cls,
        )
        # Register before descending, classes may refer to themselves.
        self._cache[cls] = desc

        type_vars = [
            p
            for p in getattr(cls, "__parameters__", ())
            if isinstance(p, TypeVar)
        ]
        placeholders = tuple(
            make_generic_parameter(
                tv.__name__,
                owner=desc.full_name,
                position=i,
                py_type=tv,
            )
            for i, tv in enumerate(type_vars)
        )
        set_frozen(desc, generic_parameters=placeholders)
        scope: Scope = dict(zip(type_vars, placeholders, strict=True))

        for tv, placeholder in scope.items():
            if tv.__bound__ is not None:
                set_frozen(
                    placeholder,
                    constraint=self.describe(
                        _typing_check.resolve_to_bound(tv), scope
                    ),
                )

        base, interfaces = self._describe_bases(cls, kind, scope)
        set_frozen(desc, base=base, declared_interfaces=interfaces)
        set_frozen(
            desc, declared_methods=tuple(self._describe_methods(cls, desc, scope))
        )

        logger.debug(
            "described %s: base=%s interfaces=%s methods=%d",
            desc.full_name,
            base.full_name if base is not None else None,
            [i.full_name for i in interfaces],
            len(desc.declared_methods),
        )
        return desc

    def _describe_bases(
        self,
        cls: type,
        kind: TypeKind,
        scope: Scope,
    ) -> tuple[TypeDescriptor | None, tuple[TypeDescriptor, ...]]:
        if cls is object:
            return None, ()

        base: TypeDescriptor | None = None
        interfaces: list[TypeDescriptor] = []
        for b in cls.__dict__.get("__orig_bases__", cls.__bases__):
            origin = typing.get_origin(b) or b
            if _typing_inspect.is_generic_marker(origin):
                continue
            described = self.describe(b, scope)
            if (
                kind is TypeKind.Class
                and base is None
                and not _typing_inspect.is_interface(origin)
            ):
                base = described
            elif described not in interfaces:
                interfaces.append(described)

        if base is None and kind is TypeKind.Class:
            base = self.describe(object)

        return base, tuple(interfaces)

    def _describe_methods(
        self,
        cls: type,
        desc: TypeDescriptor,
        scope: Scope,
    ) -> Iterator[MethodDescriptor]:
        if desc.kind is not TypeKind.Interface:
            ctor = self._describe_constructor(cls, desc, scope)
            if ctor is not None:
                yield ctor

        for name, value in cls.__dict__.items():
            if name == "__init__":
                continue
            fn = getattr(value, "__func__", value)
            if getattr(fn, "__module__", None) in _MACHINERY_MODULES:
                # e.g. the __subclasshook__ that Protocol installs
                continue
            if isinstance(value, (staticmethod, classmethod)) and not (
                inspect.isfunction(fn)
            ):
                # builtin wrappers such as str.maketrans have no signature
                logger.debug("%s.%s has no signature", desc.full_name, name)
                continue

            if isinstance(value, staticmethod):
                fn = value.__func__
                yield from self._describe_callable(
                    desc, scope, name, fn, impl=fn, is_static=True
                )
            elif isinstance(value, classmethod):
                fn = value.__func__
                yield from self._describe_callable(
                    desc,
                    scope,
                    name,
                    fn,
                    impl=fn,
                    is_static=True,
                    is_classmethod=True,
                )
            elif isinstance(value, property):
                for prefix, accessor in (
                    ("get", value.fget),
                    ("set", value.fset),
                ):
                    if accessor is not None:
                        yield self._describe_method(
                            desc,
                            scope,
                            f"{prefix}_{name}",
                            accessor,
                            impl=accessor,
                            is_accessor=True,
                            public=_is_public(name),
                        )
            elif inspect.isfunction(value):
                yield from self._describe_callable(
                    desc, scope, name, value, impl=value
                )

    def _constructor(
        self,
        cls: type,
        desc: TypeDescriptor,
        parameters: tuple[ParameterDescriptor, ...] = (),
        attributes: tuple[AttributeDescriptor, ...] = (),
    ) -> MethodDescriptor:
        return MethodDescriptor(
            name="__init__",
            declaring_type=desc,
            parameters=parameters,
            return_type=desc,
            is_constructor=True,
            is_static=True,
            attributes=attributes,
            impl=cls,
        )

    def _describe_constructor(
        self,
        cls: type,
        desc: TypeDescriptor,
        scope: Scope,
    ) -> MethodDescriptor | None:
        owner = next(
            (c for c in cls.__mro__ if "__init__" in vars(c)), object
        )
        init = vars(owner)["__init__"]
        default_init = (
            owner is object
            or bool(getattr(owner, "_is_protocol", False))
            or _typing_inspect.is_generic_marker(owner)
        )

        if default_init and cls.__new__ is object.__new__:
            return self._constructor(cls, desc)

        if default_init or not inspect.isfunction(init):
            # Builtin initializers rarely have an introspectable signature.
            try:
                sig = inspect.signature(cls)
            except (TypeError, ValueError):
                return None
            params = tuple(
                self._describe_parameter(p, i, {}, scope, ())
                for i, p in enumerate(sig.parameters.values())
                if p.kind is not inspect.Parameter.VAR_KEYWORD
            )
            return self._constructor(cls, desc, params)

        inherited = None
        if owner is not cls:
            # Inherited initializer: reuse the base constructor, rebound
            # to the generic arguments this class supplies to it.
            owner_desc = self.describe(owner)
            inherited = next(
                (m for m in owner_desc.declared_methods if m.is_constructor),
                None,
            )
        if inherited is not None:
            mapping = {}
            for b in desc.iter_base_types():
                if b.generic_definition == owner_desc:
                    mapping = b.generic_mapping
                    break
            return self._constructor(
                cls,
                desc,
                tuple(p.substitute(mapping) for p in inherited.parameters),
                inherited.attributes,
            )

        method = self._describe_method(
            desc, scope, "__init__", init, impl=cls, is_static=False
        )
        return self._constructor(
            cls, desc, method.parameters, method.attributes
        )

    def _describe_callable(
        self,
        desc: TypeDescriptor,
        scope: Scope,
        name: str,
        fn: Any,
        *,
        impl: Any,
        is_static: bool = False,
        is_classmethod: bool = False,
    ) -> Iterator[MethodDescriptor]:
        try:
            overloads = get_overloads(fn)
        except AttributeError:
            overloads = []

        if overloads:
            for overload in overloads:
                yield self._describe_method(
                    desc,
                    scope,
                    name,
                    getattr(overload, "__func__", overload),
                    impl=impl,
                    is_static=is_static,
                    is_classmethod=is_classmethod,
                    extra_attributes=(_OVERLOAD_ATTR,),
                )
        else:
            yield self._describe_method(
                desc,
                scope,
                name,
                fn,
                impl=impl,
                is_static=is_static,
                is_classmethod=is_classmethod,
            )

    def _describe_method(
        self,
        desc: TypeDescriptor,
        scope: Scope,
        name: str,
        fn: Any,
        *,
        impl: Any,
        is_static: bool = False,
        is_classmethod: bool = False,
        is_accessor: bool = False,
        public: bool | None = None,
        extra_attributes: tuple[AttributeDescriptor, ...] = (),
    ) -> MethodDescriptor:
        sig = inspect.signature(fn)
        hints = self._type_hints(fn, desc)

        sig_params = list(sig.parameters.values())
        if (not is_static or is_classmethod) and sig_params:
            # self/cls
            sig_params = sig_params[1:]

        type_params = getattr(fn, "__type_params__", ()) or ()
        method_vars: list[TypeVar] = [
            tv for tv in type_params if isinstance(tv, TypeVar)
        ]
        if not method_vars:
            for p in sig_params:
                for tv in _iter_type_vars(hints.get(p.name)):
                    if tv not in scope and tv not in method_vars:
                        method_vars.append(tv)

        owner = f"{desc.full_name}.{name}"
        method_scope: Scope = dict(scope)
        generic_params: list[TypeDescriptor] = []
        for i, tv in enumerate(method_vars):
            placeholder = make_generic_parameter(
                tv.__name__, owner=owner, position=i, py_type=tv
            )
            method_scope[tv] = placeholder
            generic_params.append(placeholder)
        for tv, placeholder in zip(method_vars, generic_params, strict=True):
            if tv.__bound__ is not None:
                set_frozen(
                    placeholder,
                    constraint=self.describe(
                        _typing_check.resolve_to_bound(tv), method_scope
                    ),
                )

        params = []
        for p in sig_params:
            if p.kind is inspect.Parameter.VAR_KEYWORD:
                logger.debug("%s: **%s is not modelled", owner, p.name)
                continue
            params.append(
                self._describe_parameter(
                    p, len(params), hints, method_scope, tuple(generic_params)
                )
            )

        return MethodDescriptor(
            name=name,
            declaring_type=desc,
            parameters=tuple(params),
            return_type=self.describe(hints.get("return", Any), method_scope),
            is_static=is_static,
            is_classmethod=is_classmethod,
            is_accessor=is_accessor,
            is_public=_is_public(name) if public is None else public,
            generic_parameters=tuple(generic_params),
            attributes=(*extra_attributes, *_method_attributes(fn)),
            impl=impl,
        )

    def _describe_parameter(
        self,
        param: inspect.Parameter,
        position: int,
        hints: Mapping[str, Any],
        scope: Mapping[TypeVar, TypeDescriptor],
        method_generics: tuple[TypeDescriptor, ...],
    ) -> ParameterDescriptor:
        annotation = hints.get(param.name, Any)
        is_by_ref = False
        is_array = False

        if typing.get_origin(annotation) is _markers.Ref:
            is_by_ref = True
            annotation = typing.get_args(annotation)[0]

        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            kind = ParameterKind.Variadic
            is_array = True
        else:
            if param.kind is inspect.Parameter.KEYWORD_ONLY:
                kind = ParameterKind.KeywordOnly
            else:
                kind = ParameterKind.Positional
            if _typing_inspect.is_homogeneous_sequence(annotation):
                is_array = True
                annotation = typing.get_args(annotation)[0]

        ptype = self.describe(annotation, scope)
        return ParameterDescriptor(
            name=param.name,
            type=ptype,
            position=position,
            kind=kind,
            is_generic_placeholder=ptype in method_generics,
            is_by_ref=is_by_ref,
            is_array=is_array,
        )

    def _type_hints(self, fn: Any, desc: TypeDescriptor) -> dict[str, Any]:
        ns = module_ns_of(fn)
        localns = {}
        if isinstance(desc.py_type, type):
            localns = dict(vars(desc.py_type))
            localns.setdefault(desc.py_type.__name__, desc.py_type)
        try:
            hints = typing.get_type_hints(fn, globalns=ns, localns=localns)
        except (NameError, TypeError) as e:
            logger.debug(
                "cannot evaluate annotations of %s: %s",
                getattr(fn, "__qualname__", fn),
                e,
            )
            hints = {}
            for pn, ann in getattr(fn, "__annotations__", {}).items():
                resolved = _typing_eval.try_resolve_annotation(
                    ann, globals=ns, locals=localns
                )
                if resolved is not None:
                    hints[pn] = resolved
            return hints

        return {
            pn: _typing_eval.try_resolve_annotation(t, globals=ns) or Any
            for pn, t in hints.items()
        }
