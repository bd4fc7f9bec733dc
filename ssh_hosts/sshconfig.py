"""OpenSSH client config text model.

Only ``Host`` lines are understood: they name aliases and delimit blocks.
Every other line is carried through untouched, so rewrites never disturb
content that does not belong to the block being replaced.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

PATTERN_CHARS = frozenset("*?!")
DEFAULT_PORT = 22
INDENT = "    "
BACKUP_TIMESTAMP = "%Y%m%d-%H%M%S"
# undecodable bytes (e.g. Latin-1 comments) round-trip unchanged
ENCODING_ERRORS = "surrogateescape"

# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HostEntry:
    """A host block to be appended to the config."""

    alias: str
    hostname: str
    user: str
    port: int = DEFAULT_PORT
    identity_file: str = ""
    proxy_jump: str = ""


@dataclass(frozen=True, slots=True)
class AddResult:
    """Outcome of :func:`add_host`."""

    config_path: Path
    replaced: bool = False
    backup_path: Path | None = None


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class SSHConfigError(Exception):
    """Raised when the SSH config cannot be read, backed up or written."""


class HostExistsError(Exception):
    """Raised when an alias is already declared and overwrite was not requested."""

    def __init__(self, alias: str, config_path: Path) -> None:
        super().__init__(f'Host "{alias}" already exists in {config_path}.')
        self.alias = alias
        self.config_path = config_path


class ValidationError(Exception):
    """Raised when a host field is missing or malformed."""


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------


def parse_host_line(line: str) -> list[str] | None:
    """Return the tokens after a ``Host`` directive, or None for any other line."""
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None
    fields = stripped.split()
    if fields[0].lower() != "host":
        return None
    return fields[1:]


def is_pattern(token: str) -> bool:
    return any(ch in PATTERN_CHARS for ch in token)


def classify_line(line: str, alias: str, inside_matched_block: bool) -> tuple[bool, bool]:
    """Advance the block-removal state by one line.

    Returns ``(keep, inside_matched_block)``. A Host line opens a new block,
    matched when it lists *alias*; any other line belongs to the current one.
    """
    tokens = parse_host_line(line)
    if tokens is not None:
        inside_matched_block = alias in tokens
    return not inside_matched_block, inside_matched_block


# ---------------------------------------------------------------------------
# Alias extraction
# ---------------------------------------------------------------------------


def extract_aliases(text: str) -> list[str]:
    """Return the sorted, unique literal aliases declared in *text*."""
    aliases: set[str] = set()
    for line in text.splitlines():
        tokens = parse_host_line(line)
        if not tokens:
            continue
        aliases.update(t for t in tokens if not is_pattern(t))
    return sorted(aliases)


def read_config(path: Path) -> str:
    # newline="" keeps \r\n endings intact across a rewrite
    with path.open(encoding="utf-8", errors=ENCODING_ERRORS, newline="") as fh:
        return fh.read()


def list_aliases(path: Path) -> list[str]:
    """Read *path* and extract its aliases. ``OSError`` propagates."""
    return extract_aliases(read_config(path))


# ---------------------------------------------------------------------------
# Mutation
# ---------------------------------------------------------------------------


def alias_exists(text: str, alias: str) -> bool:
    """True if some Host line lists *alias* as a whole token."""
    for line in text.splitlines():
        tokens = parse_host_line(line)
        if tokens and alias in tokens:
            return True
    return False


def remove_host_block(text: str, alias: str) -> str:
    """Drop every block whose Host line lists *alias*; keep all other lines verbatim."""
    kept: list[str] = []
    inside = False
    for line in text.split("\n"):
        keep, inside = classify_line(line, alias, inside)
        if keep:
            kept.append(line)
    return "\n".join(kept)


def render_block(entry: HostEntry) -> str:
    """Render *entry* as a config block, preceded by a blank line."""
    lines = [
        "",
        f"Host {entry.alias}",
        f"{INDENT}HostName {entry.hostname}",
        f"{INDENT}User {entry.user}",
    ]
    if entry.port != DEFAULT_PORT:
        lines.append(f"{INDENT}Port {entry.port}")
    if entry.identity_file:
        lines.append(f"{INDENT}IdentityFile {entry.identity_file}")
    if entry.proxy_jump:
        lines.append(f"{INDENT}ProxyJump {entry.proxy_jump}")
    return "\n".join(lines) + "\n"


def validate_port(value: str | int) -> int:
    """Parse a port number in [1, 65535]; only plain ASCII digits are accepted."""
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        raise ValidationError("port must be a number between 1 and 65535")
    port = int(text)
    if not 1 <= port <= 65535:
        raise ValidationError("port must be a number between 1 and 65535")
    return port


def backup_path(path: Path, now: datetime | None = None) -> Path:
    """Return a not-yet-existing ``<path>.<timestamp>.bak`` name."""
    stamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP)
    candidate = path.with_name(f"{path.name}.{stamp}.bak")
    n = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.name}.{stamp}-{n}.bak")
        n += 1
    return candidate


def _write_new(path: Path, content: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8", errors=ENCODING_ERRORS, newline="") as fh:
        fh.write(content)


def write_backup(path: Path, content: str, now: datetime | None = None) -> Path:
    """Save *content* next to *path* under a fresh timestamped name."""
    target = backup_path(path, now)
    _write_new(target, content)
    return target


def ensure_config_file(path: Path) -> None:
    """Create the config (and its directory) empty if it does not exist yet."""
    path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    if not path.exists():
        _write_new(path, "")


def add_host(
    path: Path,
    entry: HostEntry,
    *,
    force: bool = False,
    now: datetime | None = None,
) -> AddResult:
    """Append *entry* to the config at *path*.

    If the alias is already declared, raise :class:`HostExistsError` without
    touching the file, unless *force* is set: then the original content is
    backed up and every block listing the alias is removed before appending.
    """
    try:
        original = read_config(path)
    except OSError as exc:
        raise SSHConfigError(f"Cannot read {path}: {exc}") from exc

    replaced = alias_exists(original, entry.alias)
    if replaced and not force:
        raise HostExistsError(entry.alias, path)

    backup: Path | None = None
    try:
        if replaced:
            backup = write_backup(path, original, now)
            with path.open("w", encoding="utf-8", errors=ENCODING_ERRORS, newline="") as fh:
                fh.write(remove_host_block(original, entry.alias))
        with path.open("a", encoding="utf-8", errors=ENCODING_ERRORS, newline="") as fh:
            fh.write(render_block(entry))
    except OSError as exc:
        raise SSHConfigError(f"Cannot update {path}: {exc}") from exc

    return AddResult(config_path=path, replaced=replaced, backup_path=backup)
