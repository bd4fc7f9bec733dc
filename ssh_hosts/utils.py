"""Shared console output and prompt helpers."""

from __future__ import annotations

from typing import TextIO

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

# ---------------------------------------------------------------------------
# Console singletons
# ---------------------------------------------------------------------------

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

# ---------------------------------------------------------------------------
# Line-reader prompter
# ---------------------------------------------------------------------------


class Prompter:
    """Reads answers one line at a time.

    Input comes from *stream* when given, otherwise from stdin. Prompts are
    written to *console*.
    """

    def __init__(self, console: Console | None = None, stream: TextIO | None = None) -> None:
        self.console = console or err_console
        self.stream = stream

    def ask(self, message: str, default: str = "", *, suffix: str = ": ") -> str:
        """Ask for a value; an empty answer (or end of input) yields *default*."""
        prompt = Prompt(message, console=self.console, show_default=bool(default))
        prompt.prompt_suffix = suffix
        try:
            answer = prompt(default=default, stream=self.stream)
        except EOFError:
            self.console.print()
            return default
        answer = answer.strip()
        return answer or default

    def say(self, message: str = "") -> None:
        self.console.print(message, highlight=False)


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def print_command_preview(cmd: list[str]) -> None:
    """Show the command that is about to be executed in dim style."""
    cmd_str = escape(" ".join(cmd))
    console.print(f"\n  [dim]$ {cmd_str}[/dim]\n")


def print_error(msg: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(msg)}", highlight=False)


def print_success(msg: str) -> None:
    console.print(f"[bold green]✓[/bold green] {escape(msg)}", highlight=False)


def print_info(msg: str) -> None:
    console.print(f"[bold blue]ℹ[/bold blue] {escape(msg)}", highlight=False)
