"""Subprocess runners.

``run_interactive`` hands the terminal to ssh/sftp. ``SubprocessRunner`` is
the capture-output collaborator used by the fuzzy finder and ssh-keyscan;
tests substitute any object with the same ``capture`` method.
"""

from __future__ import annotations

import os
import subprocess
from typing import Protocol

from ssh_hosts.utils import console, err_console, print_command_preview


class CommandRunner(Protocol):
    def capture(
        self,
        cmd: list[str],
        *,
        input_text: str | None = None,
        timeout: float | None = None,
        show_stderr: bool = False,
    ) -> tuple[int, str]:
        """Run *cmd* to completion and return (exit_code, stdout_text)."""
        ...


class SubprocessRunner:
    """Runs commands with :func:`subprocess.run`, capturing stdout."""

    def capture(
        self,
        cmd: list[str],
        *,
        input_text: str | None = None,
        timeout: float | None = None,
        show_stderr: bool = False,
    ) -> tuple[int, str]:
        """Run a command and capture its stdout.

        stderr goes to the terminal when *show_stderr* is set (fzf draws its
        UI there), otherwise it is discarded. Returns 124 on timeout and 127
        when the executable is missing, like a shell would.
        """
        try:
            result = subprocess.run(
                cmd,
                input=input_text,
                stdout=subprocess.PIPE,
                stderr=None if show_stderr else subprocess.DEVNULL,
                text=True,
                errors="replace",
                timeout=timeout,
                env=os.environ.copy(),
            )
            return result.returncode, result.stdout
        except subprocess.TimeoutExpired:
            return 124, ""
        except FileNotFoundError:
            return 127, ""
        except PermissionError:
            return 126, ""


def run_interactive(cmd: list[str], *, preview: bool = True) -> int:
    """Run a command interactively, inheriting the terminal's stdin/stdout/stderr.

    Used for ssh and sftp sessions. Returns the process exit code.
    """
    if preview:
        print_command_preview(cmd)

    try:
        result = subprocess.run(cmd, env=os.environ.copy())
        return result.returncode
    except FileNotFoundError:
        err_console.print(f"[bold red]Command not found:[/bold red] {cmd[0]}")
        return 127
    except PermissionError:
        err_console.print(f"[bold red]Permission denied:[/bold red] {cmd[0]}")
        return 126
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        return 130
