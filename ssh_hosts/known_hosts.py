"""Best-effort known_hosts pre-population via ssh-keyscan."""

from __future__ import annotations

import os
from pathlib import Path

from ssh_hosts.executor import CommandRunner
from ssh_hosts.ssh import build_keyscan_command
from ssh_hosts.sshconfig import DEFAULT_PORT, ENCODING_ERRORS


def merge_known_hosts(existing: str, scanned: str) -> list[str]:
    """Return the sorted, unique, non-blank lines of both texts."""
    lines = {line for line in (existing + "\n" + scanned).splitlines() if line.strip()}
    return sorted(lines)


def populate_known_hosts(
    path: Path,
    hostname: str,
    port: int = DEFAULT_PORT,
    *,
    runner: CommandRunner,
    timeout: int = 5,
) -> int:
    """Scan *hostname* and merge its keys into the known_hosts file at *path*.

    Returns the number of key lines scanned, or 0 when the scan failed or the
    file could not be updated. Failures never raise.
    """
    code, out = runner.capture(build_keyscan_command(hostname, port, timeout))
    scanned = [line for line in out.splitlines() if line.strip()]
    if code != 0 or not scanned:
        return 0

    try:
        path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        existing = path.read_text(encoding="utf-8", errors=ENCODING_ERRORS) if path.exists() else ""
        merged = merge_known_hosts(existing, out)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8", errors=ENCODING_ERRORS) as fh:
            fh.write("\n".join(merged) + "\n")
    except OSError:
        return 0
    return len(scanned)
