"""Typer CLI for ``ssh-menu``: pick a host from the SSH config and connect."""

from __future__ import annotations

from typing import Annotated, Optional

import typer

from ssh_hosts import __version__
from ssh_hosts.config import ConfigError, Settings, load_settings
from ssh_hosts.utils import Prompter, console, err_console, print_error

EPILOG = (
    "Examples:\n\n"
    "  ssh-menu                          pick a host and ssh into it\n\n"
    "  ssh-menu --sftp                   pick a host and open sftp\n\n"
    "  ssh-menu --print                  just print the chosen host\n\n"
    "  ssh-menu -- -L 8080:localhost:80  pass extra arguments to ssh"
)

app = typer.Typer(
    name="ssh-menu",
    help="Pick a host from your SSH config and connect to it.",
    rich_markup_mode="rich",
    add_completion=False,
)


def _load_settings_or_exit() -> Settings:
    """Load settings, printing a helpful error and exiting on failure."""
    try:
        return load_settings()
    except ConfigError as exc:
        print_error(str(exc))
        raise typer.Exit(1)


@app.command(
    epilog=EPILOG,
    context_settings={
        "help_option_names": ["-h", "--help"],
        "ignore_unknown_options": True,
    },
)
def main(
    passthrough: Annotated[
        Optional[list[str]],
        typer.Argument(help="Extra arguments for ssh (put them after --).", show_default=False),
    ] = None,
    sftp: Annotated[bool, typer.Option("--sftp", help="Open sftp instead of ssh.")] = False,
    print_only: Annotated[
        bool, typer.Option("--print", help="Only print the chosen host.")
    ] = False,
    version: Annotated[bool, typer.Option("--version", help="Show version and exit.")] = False,
):
    """Pick a host from your SSH config and connect to it."""
    if version:
        console.print(f"ssh-hosts [bold]{__version__}[/bold]")
        raise typer.Exit()

    settings = _load_settings_or_exit()
    config_path = settings.ssh_config

    from ssh_hosts.sshconfig import list_aliases

    try:
        aliases = list_aliases(config_path)
    except OSError:
        err_console.print(f"No readable SSH config at {config_path}", markup=False, highlight=False)
        raise typer.Exit(1)

    from ssh_hosts.executor import SubprocessRunner
    from ssh_hosts.selector import SelectionError, find_fuzzy_finder, pick_host

    try:
        host = pick_host(
            aliases,
            runner=SubprocessRunner(),
            prompter=Prompter(err_console),
            finder=find_fuzzy_finder(settings.picker),
        )
    except SelectionError:
        err_console.print("No host selected.", highlight=False)
        raise typer.Exit(1)

    if print_only:
        typer.echo(host)
        raise typer.Exit()

    from ssh_hosts.executor import run_interactive
    from ssh_hosts.ssh import Mode, build_connect_command

    mode = Mode.TRANSFER if sftp else Mode.CONNECT
    cmd = build_connect_command(host, mode, passthrough)
    raise typer.Exit(run_interactive(cmd))


def app_entry() -> None:
    """Console script entry point for ``ssh-menu``."""
    app()
