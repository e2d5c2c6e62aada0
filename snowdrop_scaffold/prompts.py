"""Interactive prompts built on ``rich.prompt``.

Every prompt shares one failure contract, implemented in ``handle_error``:

* ``KeyboardInterrupt`` (Ctrl-C) ends the process at once with status 1.
* Any other failure is reported on standard output and the prompt returns
  its zero value (``False``, ``""`` or ``[]``) so the run carries on.

Choice prompts always list their options in sorted order so the numbering is
stable between runs.
"""

from __future__ import annotations

import sys
from typing import IO

from rich.console import Console
from rich.prompt import Confirm, Prompt

from snowdrop_scaffold.utils import console as default_console


def handle_error(err: BaseException | None) -> None:
    """Apply the shared prompt failure contract to ``err``."""
    if err is None:
        return
    if isinstance(err, KeyboardInterrupt):
        sys.exit(1)
    print(f"Encountered an error processing prompt: {err}")


class Prompter:
    """Confirm / select / multi-select / free-text prompts.

    Args:
        console: Console used to render prompts; defaults to the shared one.
        stream: Optional file-like object answers are read from instead of
            the terminal.
    """

    def __init__(self, console: Console | None = None, stream: IO[str] | None = None) -> None:
        self.console = console or default_console
        self.stream = stream

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question. Only an explicit ``n`` answers no."""
        try:
            return Confirm.ask(message, console=self.console, stream=self.stream)
        except (KeyboardInterrupt, Exception) as exc:  # noqa: BLE001
            handle_error(exc)
            return False

    def select(self, message: str, options: list[str], default: str | None = None) -> str:
        """Pick exactly one of ``options``.

        Raises:
            ValueError: If ``default`` is given but is not one of ``options``.
        """
        ordered = sorted(options)
        if default is not None and default not in ordered:
            raise ValueError(f"default {default!r} is not one of the options")
        if not ordered:
            self._print_empty(message)
            return ""

        default_number = str(ordered.index(default) + 1) if default is not None else ""
        try:
            self._print_options(message, ordered)
            while True:
                answer = Prompt.ask(
                    "Enter number",
                    console=self.console,
                    default=default_number,
                    show_default=default is not None,
                    stream=self.stream,
                )
                picked = self._parse_numbers(answer or default_number, len(ordered))
                if picked is None or len(picked) != 1:
                    self.console.print(f"[prompt.invalid]Please enter a number from 1 to {len(ordered)}")
                    continue
                return ordered[picked[0]]
        except (KeyboardInterrupt, Exception) as exc:  # noqa: BLE001
            handle_error(exc)
            return ""

    def multi_select(self, message: str, options: list[str], required: bool = True) -> list[str]:
        """Pick any number of ``options`` by entering comma-separated numbers.

        The result follows the order the numbers were entered in. With
        ``required`` the user is asked again until at least one is picked.
        """
        ordered = sorted(options)
        if not ordered:
            self._print_empty(message)
            return []
        try:
            self._print_options(message, ordered)
            while True:
                answer = Prompt.ask(
                    "Enter numbers separated by commas",
                    console=self.console,
                    default="",
                    show_default=False,
                    stream=self.stream,
                )
                picked = self._parse_numbers(answer, len(ordered))
                if picked is None:
                    self.console.print("[prompt.invalid]Please enter numbers from the list")
                    continue
                if required and not picked:
                    self.console.print("[prompt.invalid]Select at least one option")
                    continue
                return [ordered[i] for i in picked]
        except (KeyboardInterrupt, Exception) as exc:  # noqa: BLE001
            handle_error(exc)
            return []

    def ask(self, message: str, default: str | None = None) -> str:
        """Free-text question. Empty input returns ``default`` when given."""
        try:
            while True:
                answer = Prompt.ask(
                    message, console=self.console, default=default or "", show_default=bool(default),
                    stream=self.stream,
                )
                if answer:
                    return answer
                if default is not None:
                    return default
                self.console.print("[prompt.invalid]A value is required")
        except (KeyboardInterrupt, Exception) as exc:  # noqa: BLE001
            handle_error(exc)
            return ""

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _print_options(self, message: str, ordered: list[str]) -> None:
        self.console.print(f"[prompt]{message}:[/prompt]")
        for i, option in enumerate(ordered, 1):
            self.console.print(f"  {i}) {option}", markup=False, highlight=False)

    def _print_empty(self, message: str) -> None:
        self.console.print(f"[prompt.invalid]{message}: nothing to choose from")

    @staticmethod
    def _parse_numbers(answer: str, count: int) -> list[int] | None:
        """Turn ``"3, 1"`` into ``[2, 0]``; ``None`` if anything is out of range."""
        picked: list[int] = []
        for part in answer.replace(" ", ",").split(","):
            if not part:
                continue
            if not part.isdigit() or not 1 <= int(part) <= count:
                return None
            index = int(part) - 1
            if index not in picked:
                picked.append(index)
        return picked

