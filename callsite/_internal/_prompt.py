# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

"""Interactive choice and line-input primitives."""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Protocol, TextIO

import collections
import sys

from callsite.errors import PromptAborted

from ._color import get_color
from ._reflection._base import struct

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


@struct
class Choice:
    label: str
    value: Any = None
    help_text: str = ""


@struct
class ChoiceSet:
    options: tuple[Choice, ...]
    default_index: int = 0

    def __post_init__(self) -> None:
        if not self.options:
            raise ValueError("a choice set needs at least one option")
        if not 0 <= self.default_index < len(self.options):
            raise ValueError(
                f"default index {self.default_index} is out of range"
                f" for {len(self.options)} options"
            )


def default_indices(default: int | Sequence[int], count: int) -> list[int]:
    """Normalize *default* to a non-empty list of indices into *count*
    options."""
    defaults = [default] if isinstance(default, int) else list(default)
    if not defaults or not all(0 <= d < count for d in defaults):
        raise ValueError(
            f"default {default!r} is out of range for {count} options"
        )
    return defaults


class Prompt(Protocol):
    def choose(
        self,
        caption: str,
        message: str,
        options: Sequence[Choice],
        default: int | Sequence[int],
        allow_multiple: bool = False,
    ) -> int | list[int]: ...

    def read_value(self, caption: str, label: str) -> str: ...


class ConsolePrompt:
    """Line-based prompt on a pair of text streams.

    Options are shown numbered from 1; the returned indices are
    0-based positions in *options*.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        *,
        color: bool | None = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._c = get_color(self._stdout, force=color)

    def _print(self, msg: str = "") -> None:
        print(msg, file=self._stdout)

    def _readline(self, prompt: str) -> str:
        self._stdout.write(prompt)
        self._stdout.flush()
        try:
            line = self._stdin.readline()
        except KeyboardInterrupt as e:
            raise PromptAborted("prompt interrupted") from e
        if not line:
            raise PromptAborted("end of input")
        return line.strip()

    def _parse(
        self,
        answer: str,
        count: int,
        allow_multiple: bool,
    ) -> list[int] | None:
        parts = answer.split(",") if allow_multiple else [answer]
        picked = []
        for part in parts:
            try:
                n = int(part.strip())
            except ValueError:
                return None
            if not 1 <= n <= count:
                return None
            picked.append(n - 1)
        return picked

    def choose(
        self,
        caption: str,
        message: str,
        options: Sequence[Choice],
        default: int | Sequence[int],
        allow_multiple: bool = False,
    ) -> int | list[int]:
        """Show *options* and read the pick.

        *default* is one index, or several when *allow_multiple* is set;
        it is what a blank answer returns.
        """
        defaults = default_indices(default, len(options))
        C = self._c
        self._print(f"{C.BOLD}{caption}{C.ENDC}")
        if message:
            self._print(message)
        for i, option in enumerate(options, start=1):
            marker = "*" if i - 1 in defaults else " "
            line = f" {marker}{C.BLUE}[{i}]{C.ENDC} {option.label}"
            if option.help_text:
                line += f"  {C.CYAN}{option.help_text}{C.ENDC}"
            self._print(line)

        if allow_multiple:
            hint = "numbers separated by commas"
            shown = ",".join(str(d + 1) for d in defaults)
        else:
            hint = "number"
            shown = str(defaults[0] + 1)
        while True:
            answer = self._readline(f"Choose {hint} [{shown}]: ")
            if not answer:
                return defaults if allow_multiple else defaults[0]
            picked = self._parse(answer, len(options), allow_multiple)
            if picked is not None:
                return picked if allow_multiple else picked[0]
            self._print(
                f"{C.WARNING}Invalid choice {answer!r}, expected a"
                f" {hint} between 1 and {len(options)}{C.ENDC}"
            )

    def read_value(self, caption: str, label: str) -> str:
        C = self._c
        self._print(f"{C.BOLD}{caption}{C.ENDC}")
        return self._readline(f"{label}: ")


class ScriptedPrompt:
    """A prompt that replays canned answers, for tests and batch use.

    Each entry in *choices* is an index, a list of indices, or ``None``
    to accept the default.  Running out of answers aborts the prompt.
    All requests are recorded in ``choose_calls`` and ``read_calls``.
    """

    def __init__(
        self,
        choices: Iterable[int | list[int] | None] = (),
        values: Iterable[str] = (),
    ) -> None:
        self._choices = collections.deque(choices)
        self._values = collections.deque(values)
        self.choose_calls: list[tuple[str, str, ChoiceSet]] = []
        self.read_calls: list[tuple[str, str]] = []

    @property
    def prompt_count(self) -> int:
        return len(self.choose_calls) + len(self.read_calls)

    def choose(
        self,
        caption: str,
        message: str,
        options: Sequence[Choice],
        default: int | Sequence[int],
        allow_multiple: bool = False,
    ) -> int | list[int]:
        defaults = default_indices(default, len(options))
        self.choose_calls.append(
            (
                caption,
                message,
                ChoiceSet(options=tuple(options), default_index=defaults[0]),
            )
        )
        if not self._choices:
            raise PromptAborted(f"no scripted answer for {caption!r}")
        answer = self._choices.popleft()
        if answer is None:
            return defaults if allow_multiple else defaults[0]
        if isinstance(answer, list):
            return answer if allow_multiple else answer[0]
        return [answer] if allow_multiple else answer

    def read_value(self, caption: str, label: str) -> str:
        self.read_calls.append((caption, label))
        if not self._values:
            raise PromptAborted(f"no scripted value for {label!r}")
        return self._values.popleft()
