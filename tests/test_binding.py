# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Tests for argument binding and overload selection."""

import unittest

from callsite import (
    AmbiguousOverloadError,
    BindingError,
    BindingResult,
    BindingWarning,
    NotFoundError,
    Ref,
    ScriptedPrompt,
    TypeCatalog,
    bind_arguments,
    select_overload,
)
from callsite._internal._binding import (
    accepts_type,
    can_bind,
    make_choice_set,
    select_and_bind,
)

from tests.sample_types import (
    Box,
    Dog,
    IContainer,
    Processor,
    Service,
    Tagger,
)


class BindingTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = TypeCatalog()

    def methods(self, tp, name):
        return [
            m for m in self.catalog.describe(tp).methods if m.name == name
        ]

    def method(self, tp, name):
        (m,) = self.methods(tp, name)
        return m

    def bind(self, method, supplied, prompt=None):
        return bind_arguments(
            method,
            supplied,
            catalog=self.catalog,
            prompt=prompt if prompt is not None else ScriptedPrompt(),
        )


class TestAcceptsType(BindingTestCase):
    def test_plain_types(self) -> None:
        int_t = self.catalog.describe(int)
        self.assertTrue(accepts_type(int_t, 3, self.catalog))
        self.assertTrue(accepts_type(int_t, True, self.catalog))
        self.assertFalse(accepts_type(int_t, "3", self.catalog))
        self.assertTrue(
            accepts_type(self.catalog.describe(object), "3", self.catalog)
        )

    def test_special_types(self) -> None:
        optional = self.catalog.describe(int | None)
        self.assertTrue(accepts_type(optional, None, self.catalog))
        self.assertTrue(accepts_type(optional, 1, self.catalog))
        self.assertFalse(accepts_type(optional, "x", self.catalog))

    def test_bounded_placeholder(self) -> None:
        (n,) = self.method(Tagger, "bounded").generic_parameters
        self.assertTrue(accepts_type(n, 3, self.catalog))
        self.assertFalse(accepts_type(n, "x", self.catalog))

    def test_generic_instances(self) -> None:
        target = self.catalog.describe(IContainer[str])
        self.assertTrue(accepts_type(target, Box[str]("x"), self.catalog))
        self.assertFalse(accepts_type(target, Box[int](1), self.catalog))
        # no __orig_class__, arguments unknown
        self.assertTrue(accepts_type(target, Box("x"), self.catalog))
        self.assertFalse(accepts_type(target, Dog("rex"), self.catalog))


class TestBindArguments(BindingTestCase):
    def test_positional(self) -> None:
        prompt = ScriptedPrompt()
        result = self.bind(self.method(Tagger, "tag"), [42, "x"], prompt)
        self.assertEqual(result.bound_arguments, (42, "x"))
        self.assertTrue(result.ok)
        self.assertEqual(result.prompted, ())
        self.assertEqual(prompt.prompt_count, 0)

    def test_first_assignable_value(self) -> None:
        result = self.bind(self.method(Service, "fetch"), [3, "k"])
        self.assertEqual(result.bound_arguments, ("k",))

    def test_prompts_for_missing(self) -> None:
        prompt = ScriptedPrompt(values=["abc"])
        result = self.bind(self.method(Service, "fetch"), [], prompt)
        self.assertEqual(result.bound_arguments, ("abc",))
        self.assertEqual(result.prompted, (0,))
        self.assertEqual(
            prompt.read_calls, [("fetch(key: str) -> str", "key: str")]
        )

    def test_prompted_text_is_converted(self) -> None:
        prompt = ScriptedPrompt(values=["12"])
        result = self.bind(self.method(Processor, "fail"), [], prompt)
        self.assertEqual(result.bound_arguments, (12,))

    def test_braced_literal(self) -> None:
        first = self.method(Service, "first")
        prompt = ScriptedPrompt(values=["{[1, 2]}", "{3, 4}"])
        self.assertEqual(self.bind(first, [], prompt).bound_arguments, ([1, 2],))
        self.assertEqual(self.bind(first, [], prompt).bound_arguments, ([3, 4],))

    def test_cast_failure(self) -> None:
        prompt = ScriptedPrompt(values=["abc"])
        with self.assertLogs("callsite._internal._binding", "WARNING"):
            with self.assertWarnsRegex(BindingWarning, "'abc'"):
                result = self.bind(
                    self.method(Processor, "fail"), [], prompt
                )
        self.assertEqual(result.bound_arguments, (None,))
        self.assertEqual(result.failures, (0,))
        self.assertFalse(result.ok)

    def test_aborted_value_prompt(self) -> None:
        with self.assertRaisesRegex(BindingError, "'key'"):
            self.bind(self.method(Service, "fetch"), [])

    def test_by_ref(self) -> None:
        swap = self.method(Service, "swap")
        result = self.bind(swap, [1, 2])
        self.assertEqual(result.bound_arguments, (Ref(1), 2))

        cell = Ref(5)
        result = self.bind(swap, [cell, 6])
        self.assertIs(result.bound_arguments[0], cell)

        prompt = ScriptedPrompt(values=["7"])
        result = self.bind(swap, [8], prompt)
        self.assertEqual(result.bound_arguments, (Ref(8), 7))

    def test_result_length_invariant(self) -> None:
        with self.assertRaises(ValueError):
            BindingResult(
                method=self.method(Service, "fetch"), bound_arguments=()
            )


class TestSelectOverload(BindingTestCase):
    def test_can_bind_is_exact(self) -> None:
        fetch = self.method(Service, "fetch")
        self.assertTrue(can_bind(fetch, ["a"], self.catalog))
        self.assertFalse(can_bind(fetch, ["a", "b"], self.catalog))
        self.assertFalse(can_bind(fetch, [], self.catalog))

    def test_single_candidate_is_used_silently(self) -> None:
        fetch = self.methods(Service, "fetch")
        prompt = ScriptedPrompt()
        chosen = select_overload(
            fetch, [5], catalog=self.catalog, prompt=prompt
        )
        self.assertIs(chosen, fetch[0])
        self.assertEqual(prompt.prompt_count, 0)

    def test_several_candidates_are_all_offered(self) -> None:
        # process(int) binds 5 exactly, the choice is still the user's
        candidates = self.methods(Processor, "process")
        prompt = ScriptedPrompt(choices=[None, 0])
        chosen = select_overload(
            candidates, [5], catalog=self.catalog, prompt=prompt
        )
        self.assertIs(chosen, candidates[1])
        chosen = select_overload(
            candidates, ["5"], catalog=self.catalog, prompt=prompt
        )
        self.assertIs(chosen, candidates[0])
        for _, _, choices in prompt.choose_calls:
            self.assertEqual(len(choices.options), 2)
            self.assertEqual(choices.default_index, 1)

    def test_ambiguous_prompts_with_all_candidates(self) -> None:
        candidates = self.methods(Processor, "process")
        prompt = ScriptedPrompt(choices=[None])
        chosen = select_overload(
            candidates, [1.5], catalog=self.catalog, prompt=prompt
        )
        self.assertIs(chosen, candidates[1])

        ((caption, _, choices),) = prompt.choose_calls
        self.assertEqual(caption, "Processor.process")
        self.assertEqual(
            [c.label for c in choices.options],
            ["process(value: int) -> str", "process(value: str) -> str"],
        )
        self.assertEqual(choices.default_index, 1)

    def test_aborted_choice(self) -> None:
        candidates = self.methods(Processor, "process")
        with self.assertRaises(AmbiguousOverloadError) as cm:
            select_overload(
                candidates,
                [1.5],
                catalog=self.catalog,
                prompt=ScriptedPrompt(),
            )
        self.assertEqual(list(cm.exception.candidates), candidates)
        self.assertIn("process(value: str) -> str", str(cm.exception))

    def test_no_candidates(self) -> None:
        with self.assertRaises(NotFoundError):
            select_overload(
                [], [], catalog=self.catalog, prompt=ScriptedPrompt()
            )

    def test_make_choice_set(self) -> None:
        choices = make_choice_set(self.methods(Processor, "process"))
        self.assertEqual(len(choices.options), 2)
        self.assertEqual(choices.default_index, 1)
        self.assertEqual(choices.options[0].help_text, "Processor")

    def test_rebind_after_failure(self) -> None:
        candidates = self.methods(Processor, "process")
        prompt = ScriptedPrompt(choices=[0, 1], values=["abc", "abc"])
        with self.assertWarns(BindingWarning):
            with self.assertLogs("callsite._internal._binding", "WARNING"):
                result = select_and_bind(
                    candidates, [], catalog=self.catalog, prompt=prompt
                )
        self.assertIs(result.method, candidates[1])
        self.assertEqual(result.bound_arguments, ("abc",))
        self.assertTrue(result.ok)
        self.assertEqual(len(prompt.choose_calls), 2)

    def test_rebind_gives_up(self) -> None:
        candidates = self.methods(Processor, "process")
        prompt = ScriptedPrompt(choices=[0, 0], values=["x", "y"])
        with self.assertWarns(BindingWarning):
            with self.assertLogs("callsite._internal._binding", "WARNING"):
                result = select_and_bind(
                    candidates,
                    [],
                    catalog=self.catalog,
                    prompt=prompt,
                    max_attempts=1,
                )
        self.assertFalse(result.ok)
        self.assertEqual(result.bound_arguments, (None,))


if __name__ == "__main__":
    unittest.main()
