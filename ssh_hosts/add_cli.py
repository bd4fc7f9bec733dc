"""Typer CLI for ``ssh-add-host``: append a Host block to the SSH config.

Any field not given as a flag is prompted for. Exit status 2 means the alias
already exists and ``-f`` was not given.
"""

from __future__ import annotations

import getpass
from typing import Annotated, Optional

import typer

from ssh_hosts import __version__
from ssh_hosts.config import ConfigError, Settings, load_settings
from ssh_hosts.utils import Prompter, console, err_console, print_error, print_info, print_success

EXIT_CONFLICT = 2

app = typer.Typer(
    name="ssh-add-host",
    help="Add a Host entry to your SSH config.",
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


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ""


def _is_yes(value: str) -> bool:
    return value.strip().lower() in ("yes", "y")


@app.command(context_settings={"help_option_names": ["--help"]})
def main(
    force: Annotated[
        bool, typer.Option("-f", "--force", help="Overwrite the Host alias if it already exists.")
    ] = False,
    alias: Annotated[
        Optional[str], typer.Option("-a", "--alias", help="Host alias (e.g. web-prod).")
    ] = None,
    hostname: Annotated[
        Optional[str], typer.Option("-h", "--hostname", help="HostName (IP or DNS).")
    ] = None,
    user: Annotated[
        Optional[str], typer.Option("-u", "--user", help="SSH user (e.g. ubuntu).")
    ] = None,
    port: Annotated[
        Optional[str], typer.Option("-p", "--port", help="Port (default: 22).")
    ] = None,
    identity_file: Annotated[
        Optional[str],
        typer.Option("-i", "--identity-file", help="Path to private key (e.g. ~/.ssh/id_ed25519)."),
    ] = None,
    proxy_jump: Annotated[
        Optional[str], typer.Option("-P", "--proxy-jump", help="ProxyJump (e.g. bastion).")
    ] = None,
    add_known_hosts: Annotated[
        Optional[str],
        typer.Option(
            "--add-known-hosts",
            metavar="yes|no",
            help="Run ssh-keyscan to pre-populate known_hosts.",
        ),
    ] = None,
    version: Annotated[bool, typer.Option("--version", help="Show version and exit.")] = False,
):
    """Add a Host entry to your SSH config. Prompts for any missing fields."""
    if version:
        console.print(f"ssh-hosts [bold]{__version__}[/bold]")
        raise typer.Exit()

    settings = _load_settings_or_exit()
    prompter = Prompter(console)

    if alias is None:
        alias = prompter.ask("Host alias (unique, no spaces)")
    if hostname is None:
        hostname = prompter.ask("HostName (DNS or IP)")
    if user is None:
        user = prompter.ask("User", _current_user())
    if port is None:
        port = prompter.ask("Port", "22")
    if identity_file is None:
        identity_file = prompter.ask("IdentityFile path (optional, blank to skip)")
    if proxy_jump is None:
        proxy_jump = prompter.ask("ProxyJump (optional, blank to skip)")
    if add_known_hosts is None:
        default = "yes" if settings.add_host.add_known_hosts else "no"
        add_known_hosts = prompter.ask("Add to known_hosts via ssh-keyscan? yes/no", default)

    from ssh_hosts.sshconfig import (
        HostEntry,
        HostExistsError,
        SSHConfigError,
        ValidationError,
        add_host,
        ensure_config_file,
        validate_port,
    )

    alias, hostname, user = alias.strip(), hostname.strip(), user.strip()
    if not alias or not hostname or not user:
        print_error("missing required fields")
        raise typer.Exit(1)
    if len(alias.split()) > 1:
        print_error("alias must not contain spaces")
        raise typer.Exit(1)

    try:
        port_num = validate_port(port)
    except ValidationError as exc:
        print_error(str(exc))
        raise typer.Exit(1)

    entry = HostEntry(
        alias=alias,
        hostname=hostname,
        user=user,
        port=port_num,
        identity_file=identity_file.strip(),
        proxy_jump=proxy_jump.strip(),
    )

    config_path = settings.ssh_config
    try:
        ensure_config_file(config_path)
        result = add_host(config_path, entry, force=force)
    except HostExistsError as exc:
        err_console.print(f"{exc} Use -f to overwrite.", markup=False, highlight=False)
        raise typer.Exit(EXIT_CONFLICT)
    except (SSHConfigError, OSError) as exc:
        print_error(str(exc))
        raise typer.Exit(1)

    if result.backup_path is not None:
        print_info(f"Backup of previous config written to {result.backup_path}")

    if _is_yes(add_known_hosts):
        from ssh_hosts.executor import SubprocessRunner
        from ssh_hosts.known_hosts import populate_known_hosts

        added = populate_known_hosts(
            settings.known_hosts,
            hostname,
            port_num,
            runner=SubprocessRunner(),
            timeout=settings.add_host.keyscan_timeout,
        )
        if added:
            print_info(f"Added {added} key(s) for {hostname} to {settings.known_hosts}")

    print_success(f'Added Host "{alias}" to {config_path}.')


def app_entry() -> None:
    """Console script entry point for ``ssh-add-host``."""
    app()
