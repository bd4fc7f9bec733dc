"""Command-line builders for ssh, sftp, ssh-keyscan and the fuzzy finder.

Everything here returns a plain argv list; nothing is executed.
"""

from __future__ import annotations

from enum import Enum

from ssh_hosts.config import PickerSettings
from ssh_hosts.sshconfig import DEFAULT_PORT


class Mode(str, Enum):
    CONNECT = "connect"
    TRANSFER = "transfer"


def build_connect_command(
    alias: str,
    mode: Mode = Mode.CONNECT,
    passthrough: list[str] | None = None,
) -> list[str]:
    """Build the ``ssh`` (or ``sftp``) command for a picked alias.

    Passthrough arguments only apply to ssh; sftp is opened on the alias alone.
    """
    if mode is Mode.TRANSFER:
        return ["sftp", alias]
    cmd: list[str] = ["ssh", alias]
    if passthrough:
        cmd.extend(passthrough)
    return cmd


def build_keyscan_command(hostname: str, port: int = DEFAULT_PORT, timeout: int = 5) -> list[str]:
    """Build an ``ssh-keyscan`` command with its own connect timeout."""
    cmd: list[str] = ["ssh-keyscan", "-T", str(timeout)]
    if port != DEFAULT_PORT:
        cmd.extend(["-p", str(port)])
    cmd.append(hostname)
    return cmd


def build_picker_command(executable: str, picker: PickerSettings) -> list[str]:
    return [executable, *picker.options]
