# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.


from __future__ import annotations
from typing import TYPE_CHECKING, Any

import argparse
import ast
import builtins
import importlib
import logging
import sys

from callsite._internal._color import get_color
from callsite._internal._config import EngineConfig
from callsite._internal._reflection import (
    SignatureStyle,
    TypeCatalog,
    TypeDescriptor,
)
from callsite._internal._session import Session
from callsite.errors import CallsiteError

if TYPE_CHECKING:
    from collections.abc import Sequence


C = get_color()

_STYLES = {
    "full": SignatureStyle.Full,
    "simple": SignatureStyle.Simple,
    "paramblock": SignatureStyle.ParamBlock,
}


class ColoredArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.exit(
            2,
            f"{C.BOLD}{C.FAIL}error:{C.ENDC} {C.BOLD}{message:s}{C.ENDC}\n",
        )


parser = ColoredArgumentParser(
    prog="callsite",
    description="Resolve a method call at runtime and invoke it.",
)
parser.add_argument(
    "target",
    metavar="TARGET",
    help="The type to call on, as `module:Qualname`.",
)
parser.add_argument(
    "member",
    metavar="MEMBER",
    help="Method name or wildcard pattern; `new` calls the constructor.",
)
parser.add_argument(
    "args",
    metavar="ARG",
    nargs="*",
    help="Arguments, parsed as Python literals where possible.",
)
parser.add_argument(
    "--static",
    action="store_true",
    help="Call a static or class method instead of an instance method.",
)
parser.add_argument(
    "--init-arg",
    action="append",
    default=[],
    metavar="ARG",
    help="Constructor argument for the instance to call on (repeatable).",
)
parser.add_argument(
    "--type",
    action="append",
    dest="types",
    metavar="TYPE",
    help="Explicit parameter type for generic matching (repeatable).",
)
parser.add_argument(
    "--list",
    action="store_true",
    help="List the matching members instead of calling one.",
)
parser.add_argument(
    "--style",
    choices=sorted(_STYLES),
    default="simple",
    help="Signature style for --list (default is simple).",
)
parser.add_argument(
    "--attribute",
    action="append",
    dest="attributes",
    metavar="PATTERN",
    help="With --list, only members carrying a matching attribute.",
)
parser.add_argument(
    "--force",
    action="store_true",
    default=None,
    help="Include property accessors.",
)
parser.add_argument(
    "--non-public",
    action="store_true",
    default=None,
    help="Include members whose names start with an underscore.",
)
parser.add_argument(
    "--no-warn",
    action="store_true",
    default=None,
    help="Do not warn when nothing matches.",
)
parser.add_argument(
    "-v",
    "--verbose",
    action="count",
    default=0,
    help="Log resolution steps (-vv for debug output).",
)


def print_msg(msg: str) -> None:
    print(msg, file=sys.stderr)


def print_error(msg: str) -> None:
    print_msg(f"{C.BOLD}{C.FAIL}error: {C.ENDC}{C.BOLD}{msg}{C.ENDC}")


def parse_value(text: str) -> Any:
    try:
        return ast.literal_eval(text)
    except (ValueError, SyntaxError):
        return text


def load_object(spec: str) -> Any:
    module_name, sep, qualname = spec.partition(":")
    if not sep or not module_name or not qualname:
        raise ValueError(f"expected `module:Qualname`, got {spec!r}")
    obj: Any = importlib.import_module(module_name)
    for part in qualname.split("."):
        obj = getattr(obj, part)
    return obj


def _resolve_param_type(session: Session, spec: str) -> TypeDescriptor:
    if ":" in spec:
        return session.catalog.describe(load_object(spec))
    builtin = getattr(builtins, spec, None)
    if isinstance(builtin, type):
        return session.catalog.describe(builtin)
    return session.resolve_type(spec)


def _list_members(session: Session, target: Any, args: argparse.Namespace) -> None:
    style = _STYLES[args.style]
    methods = session.find_methods(target, args.member, args.attributes)
    for method in methods:
        rendered = session.render_signature(method, style)
        if style is SignatureStyle.ParamBlock:
            print(f"{method.qualified_name}(")
            if rendered:
                print(rendered)
            print(")")
        else:
            print(rendered)


def _run(session: Session, cls: Any, args: argparse.Namespace) -> Any:
    is_ctor = args.member.lower() in {"new", "__init__"}
    target = cls
    if not is_ctor and not args.static:
        target = session.resolve_and_invoke(
            cls, "new", [parse_value(a) for a in args.init_arg]
        )

    explicit = None
    if args.types:
        explicit = [_resolve_param_type(session, t) for t in args.types]

    return session.resolve_and_invoke(
        target,
        args.member,
        [parse_value(a) for a in args.args],
        is_static=args.static,
        explicit_param_types=explicit,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )

    try:
        config = EngineConfig.from_env().apply_cli_args(args)
    except ValueError as e:
        print_error(str(e))
        return 2

    try:
        cls = load_object(args.target)
    except (ImportError, AttributeError, ValueError) as e:
        parser.error(f"cannot load {args.target!r}: {e}")

    module = sys.modules[cls.__module__]
    with Session(TypeCatalog.from_modules(module), config=config) as session:
        try:
            if args.list:
                _list_members(session, cls, args)
                return 0
            result = _run(session, cls, args)
        except CallsiteError as e:
            print_error(str(e))
            return 1

    if result is not None:
        print(repr(result))
    return 0
