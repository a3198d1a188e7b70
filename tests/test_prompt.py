# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

import io
import unittest

from callsite import (
    Choice,
    ChoiceSet,
    ConsolePrompt,
    PromptAborted,
    ScriptedPrompt,
)


OPTIONS = (
    Choice(label="process(value: int) -> str", help_text="Processor"),
    Choice(label="process(value: str) -> str", help_text="Processor"),
)


class TestConsolePrompt(unittest.TestCase):
    def make_prompt(self, answers: str) -> tuple[ConsolePrompt, io.StringIO]:
        out = io.StringIO()
        return ConsolePrompt(io.StringIO(answers), out, color=False), out

    def test_choose(self) -> None:
        prompt, out = self.make_prompt("2\n")
        self.assertEqual(
            prompt.choose("Processor.process", "Pick one:", OPTIONS, 0), 1
        )
        text = out.getvalue()
        self.assertIn("Processor.process", text)
        self.assertIn("Pick one:", text)
        self.assertIn(" *[1] process(value: int) -> str  Processor", text)
        self.assertIn("  [2] process(value: str) -> str", text)
        self.assertIn("Choose number [1]: ", text)

    def test_default_on_blank(self) -> None:
        prompt, _ = self.make_prompt("\n")
        self.assertEqual(prompt.choose("c", "", OPTIONS, 1), 1)

    def test_invalid_then_valid(self) -> None:
        prompt, out = self.make_prompt("x\n7\n1\n")
        self.assertEqual(prompt.choose("c", "", OPTIONS, 1), 0)
        self.assertEqual(out.getvalue().count("Invalid choice"), 2)

    def test_multiple(self) -> None:
        prompt, _ = self.make_prompt("2, 1\n")
        self.assertEqual(
            prompt.choose("c", "", OPTIONS, 0, allow_multiple=True), [1, 0]
        )
        prompt, _ = self.make_prompt("\n")
        self.assertEqual(
            prompt.choose("c", "", OPTIONS, 0, allow_multiple=True), [0]
        )

    def test_multiple_defaults(self) -> None:
        options = (*OPTIONS, Choice(label="skip()"))
        prompt, out = self.make_prompt("\n")
        self.assertEqual(
            prompt.choose("c", "", options, [0, 2], allow_multiple=True),
            [0, 2],
        )
        text = out.getvalue()
        self.assertIn(" *[1] process(value: int)", text)
        self.assertIn("  [2] process(value: str)", text)
        self.assertIn(" *[3] skip()", text)
        self.assertIn("Choose numbers separated by commas [1,3]: ", text)

        # a single pick falls back to the first default
        prompt, _ = self.make_prompt("\n")
        self.assertEqual(prompt.choose("c", "", options, [2, 0]), 2)

    def test_bad_default(self) -> None:
        prompt, _ = self.make_prompt("1\n")
        for default in (2, -1, [], [0, 5]):
            with self.subTest(default=default):
                with self.assertRaises(ValueError):
                    prompt.choose("c", "", OPTIONS, default)

    def test_end_of_input(self) -> None:
        prompt, _ = self.make_prompt("")
        with self.assertRaises(PromptAborted):
            prompt.choose("c", "", OPTIONS, 0)
        with self.assertRaises(PromptAborted):
            prompt.read_value("c", "key: str")

    def test_read_value(self) -> None:
        prompt, out = self.make_prompt("  hello \n")
        self.assertEqual(
            prompt.read_value("fetch(key: str) -> str", "key: str"), "hello"
        )
        self.assertEqual(
            out.getvalue(), "fetch(key: str) -> str\nkey: str: "
        )


class TestScriptedPrompt(unittest.TestCase):
    def test_replays_answers(self) -> None:
        prompt = ScriptedPrompt(choices=[0, None, [1]], values=["a"])
        self.assertEqual(prompt.choose("c", "m", OPTIONS, 1), 0)
        self.assertEqual(prompt.choose("c", "m", OPTIONS, 1), 1)
        self.assertEqual(
            prompt.choose("c", "m", OPTIONS, 0, allow_multiple=True), [1]
        )
        self.assertEqual(prompt.read_value("c", "x: int"), "a")
        self.assertEqual(prompt.prompt_count, 4)
        choices = prompt.choose_calls[0][2]
        self.assertEqual(choices.options, OPTIONS)
        self.assertEqual(choices.default_index, 1)

    def test_multiple_defaults(self) -> None:
        prompt = ScriptedPrompt(choices=[None, None])
        self.assertEqual(
            prompt.choose("c", "m", OPTIONS, [1, 0], allow_multiple=True),
            [1, 0],
        )
        self.assertEqual(prompt.choose("c", "m", OPTIONS, (1,)), 1)
        self.assertEqual(prompt.choose_calls[0][2].default_index, 1)

    def test_exhausted(self) -> None:
        prompt = ScriptedPrompt()
        with self.assertRaises(PromptAborted):
            prompt.choose("c", "m", OPTIONS, 0)
        with self.assertRaises(PromptAborted):
            prompt.read_value("c", "x: int")


class TestChoiceSet(unittest.TestCase):
    def test_validation(self) -> None:
        with self.assertRaises(ValueError):
            ChoiceSet(options=())
        with self.assertRaises(ValueError):
            ChoiceSet(options=OPTIONS, default_index=2)


if __name__ == "__main__":
    unittest.main()
