# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

import contextlib
import io
import unittest
import warnings
from unittest import mock

from callsite import CallsiteWarning
from callsite.cli import load_object, main, parse_value

from tests.sample_types import Box


class TestCLI(unittest.TestCase):
    def run_main(self, *argv: str) -> tuple[int, str, str]:
        out = io.StringIO()
        err = io.StringIO()
        with (
            contextlib.redirect_stdout(out),
            contextlib.redirect_stderr(err),
            mock.patch.dict("os.environ", {"CALLSITE_CONFIG": ""}),
        ):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_instance_call(self) -> None:
        code, out, _ = self.run_main("tests.sample_types:Service", "fetch", "k")
        self.assertEqual(code, 0)
        self.assertEqual(out, "'K'\n")

    def test_literal_arguments(self) -> None:
        code, out, _ = self.run_main(
            "tests.sample_types:Tagger", "tag", "42", "x"
        )
        self.assertEqual(code, 0)
        self.assertEqual(out, "'x:42'\n")

    def test_explicit_types(self) -> None:
        code, out, _ = self.run_main(
            "tests.sample_types:Tagger",
            "tag",
            "1",
            "y",
            "--type",
            "int",
            "--type",
            "str",
        )
        self.assertEqual(code, 0)
        self.assertEqual(out, "'y:1'\n")

    def test_init_args(self) -> None:
        code, out, _ = self.run_main(
            "tests.sample_types:Dog", "describe", "--init-arg", "rex"
        )
        self.assertEqual(code, 0)
        self.assertEqual(out, "'rex says woof'\n")

    def test_static(self) -> None:
        code, out, _ = self.run_main(
            "tests.sample_types:Box", "of", "5", "--static"
        )
        self.assertEqual(code, 0)
        self.assertIn("Box object", out)

    def test_none_result_prints_nothing(self) -> None:
        code, out, _ = self.run_main("tests.sample_types:Service", "purge")
        self.assertEqual(code, 0)
        self.assertEqual(out, "")

    def test_list(self) -> None:
        code, out, _ = self.run_main("tests.sample_types:Box", "*", "--list")
        self.assertEqual(code, 0)
        self.assertEqual(
            out.splitlines(),
            [
                "__init__(item: T) -> Box",
                "get() -> T",
                "put(item: T) -> NoneType",
                "of(item: U) -> Box[U]",
                "empty() -> Box[NoneType]",
            ],
        )

    def test_list_param_block(self) -> None:
        code, out, _ = self.run_main(
            "tests.sample_types:Service",
            "configure",
            "--list",
            "--style",
            "paramblock",
        )
        self.assertEqual(code, 0)
        self.assertEqual(
            out.splitlines(),
            [
                "Service.configure(",
                "    name: str,",
                "    *,",
                "    verbose: bool,",
                ")",
            ],
        )

    def test_list_attribute_filter(self) -> None:
        code, out, _ = self.run_main(
            "tests.sample_types:Service",
            "*",
            "--list",
            "--attribute",
            "cached",
        )
        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), ["fetch(key: str) -> str"])

    def test_list_non_public_and_force(self) -> None:
        code, out, _ = self.run_main(
            "tests.sample_types:Box",
            "*",
            "--list",
            "--non-public",
            "--force",
        )
        self.assertEqual(code, 0)
        self.assertIn("_secret() -> int", out.splitlines())
        self.assertIn("get_size() -> int", out.splitlines())

    def test_call_failure(self) -> None:
        code, out, err = self.run_main(
            "tests.sample_types:Processor", "fail", "3"
        )
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("cannot handle 3", err)

    def test_unknown_member(self) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", CallsiteWarning)
            code, _, err = self.run_main(
                "tests.sample_types:Service", "nope"
            )
        self.assertEqual(code, 1)
        self.assertIn("no member named 'nope'", err)

    def test_bad_target(self) -> None:
        with self.assertRaises(SystemExit) as cm:
            self.run_main("tests.sample_types:Nope", "x")
        self.assertEqual(cm.exception.code, 2)

        with self.assertRaises(SystemExit):
            self.run_main("no_colon_here", "x")

    def test_bad_env_config(self) -> None:
        err = io.StringIO()
        with (
            contextlib.redirect_stderr(err),
            mock.patch.dict("os.environ", {"CALLSITE_CONFIG": "{bad"}),
        ):
            code = main(["tests.sample_types:Service", "fetch", "k"])
        self.assertEqual(code, 2)
        self.assertIn("CALLSITE_CONFIG", err.getvalue())


class TestHelpers(unittest.TestCase):
    def test_parse_value(self) -> None:
        self.assertEqual(parse_value("42"), 42)
        self.assertEqual(parse_value("[1, 2]"), [1, 2])
        self.assertEqual(parse_value("'a b'"), "a b")
        self.assertEqual(parse_value("hello"), "hello")

    def test_load_object(self) -> None:
        self.assertIs(load_object("tests.sample_types:Box"), Box)
        with self.assertRaises(ValueError):
            load_object("tests.sample_types")
        with self.assertRaises(AttributeError):
            load_object("tests.sample_types:Missing")


if __name__ == "__main__":
    unittest.main()
