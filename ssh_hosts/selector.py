"""Pick one alias: through an external fuzzy finder when available,
otherwise from a numbered menu."""

from __future__ import annotations

import shutil
from typing import Callable

from rich.markup import escape

from ssh_hosts.config import PickerSettings
from ssh_hosts.executor import CommandRunner
from ssh_hosts.ssh import build_picker_command
from ssh_hosts.utils import Prompter


class SelectionError(Exception):
    """Raised when no alias could be selected."""


class NoHostsError(SelectionError):
    """Raised when there is nothing to select from."""


class InvalidChoiceError(SelectionError):
    """Raised when the menu answer is not a listed number."""


def find_fuzzy_finder(
    picker: PickerSettings,
    which: Callable[[str], str | None] = shutil.which,
) -> list[str] | None:
    """Return the fuzzy finder argv, or None if its executable is not on PATH."""
    executable = which(picker.command)
    if executable is None:
        return None
    return build_picker_command(executable, picker)


def _pick_with_finder(aliases: list[str], finder: list[str], runner: CommandRunner) -> str:
    code, out = runner.capture(finder, input_text="\n".join(aliases), show_stderr=True)
    if code != 0:
        raise SelectionError(f"{finder[0]} exited with status {code}")
    choice = out.strip()
    if not choice:
        raise SelectionError("no host selected")
    return choice


def _pick_from_menu(aliases: list[str], prompter: Prompter) -> str:
    prompter.say("Select a host:")
    for num, alias in enumerate(aliases, start=1):
        prompter.say(f"{num}) {escape(alias)}")

    raw = prompter.ask(">", suffix=" ")
    try:
        choice = int(raw)
    except ValueError:
        raise InvalidChoiceError("invalid choice") from None
    if not 1 <= choice <= len(aliases):
        raise InvalidChoiceError("invalid choice")
    return aliases[choice - 1]


def pick_host(
    aliases: list[str],
    *,
    runner: CommandRunner,
    prompter: Prompter,
    finder: list[str] | None = None,
) -> str:
    """Resolve exactly one alias from *aliases*.

    Parameters
    ----------
    aliases:
        Candidates, already sorted.
    runner:
        Used to run *finder*.
    prompter:
        Used for the numbered menu when *finder* is None.
    finder:
        Fuzzy finder argv from :func:`find_fuzzy_finder`; aliases are fed to
        it one per line and its trimmed stdout is the answer.
    """
    if not aliases:
        raise NoHostsError("no hosts found")
    if finder:
        return _pick_with_finder(aliases, finder, runner)
    return _pick_from_menu(aliases, prompter)
