"""Settings loader and path resolution for ssh-hosts.

Loads optional YAML settings from ~/.config/ssh-hosts/settings.yaml (or the
SSH_HOSTS_SETTINGS env override). The SSH config path itself honours the
SSH_CONFIG env variable before anything in the settings file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

APP_NAME = "ssh-hosts"
DEFAULT_SETTINGS_DIR = Path.home() / ".config" / APP_NAME
DEFAULT_SETTINGS_PATH = DEFAULT_SETTINGS_DIR / "settings.yaml"
ENV_SETTINGS_VAR = "SSH_HOSTS_SETTINGS"
ENV_SSH_CONFIG_VAR = "SSH_CONFIG"
DEFAULT_SSH_CONFIG = Path.home() / ".ssh" / "config"
DEFAULT_KNOWN_HOSTS = Path.home() / ".ssh" / "known_hosts"
SUPPORTED_SETTINGS_VERSION = 1

DEFAULT_PICKER_OPTIONS = ["--prompt=ssh → ", "--height=40%", "--reverse", "--border"]

# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PickerSettings:
    """External fuzzy finder used by ssh-menu when it is on PATH."""

    command: str = "fzf"
    options: list[str] = field(default_factory=lambda: list(DEFAULT_PICKER_OPTIONS))


@dataclass(frozen=True, slots=True)
class AddHostSettings:
    """Defaults for ssh-add-host."""

    add_known_hosts: bool = True
    keyscan_timeout: int = 5


@dataclass(slots=True)
class Settings:
    """Top-level ssh-hosts settings."""

    version: int = SUPPORTED_SETTINGS_VERSION
    ssh_config: Path = DEFAULT_SSH_CONFIG
    known_hosts: Path = DEFAULT_KNOWN_HOSTS
    picker: PickerSettings = field(default_factory=PickerSettings)
    add_host: AddHostSettings = field(default_factory=AddHostSettings)
    settings_path: Path | None = None


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when the settings file is invalid or missing."""


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def get_settings_path() -> Path:
    """Determine which settings file to use."""
    env = os.environ.get(ENV_SETTINGS_VAR)
    if env:
        return Path(env).expanduser().resolve()
    return DEFAULT_SETTINGS_PATH


def get_ssh_config_path(configured: Path | None = None) -> Path:
    """Return the SSH config path: $SSH_CONFIG, then *configured*, then the default."""
    env = os.environ.get(ENV_SSH_CONFIG_VAR)
    if env:
        return Path(env).expanduser()
    if configured is not None:
        return configured
    return DEFAULT_SSH_CONFIG


def _parse_picker(data: Any) -> PickerSettings:
    if data is None:
        return PickerSettings()
    if not isinstance(data, dict):
        raise ConfigError("'picker' must be a mapping with 'command' and 'options'.")
    command = data.get("command", "fzf")
    if not command or not isinstance(command, str):
        raise ConfigError("'picker.command' must be a non-empty string.")
    options = data.get("options", DEFAULT_PICKER_OPTIONS)
    if not isinstance(options, list):
        raise ConfigError("'picker.options' must be a list of strings.")
    return PickerSettings(command=command, options=[str(o) for o in options])


def _parse_add_host(data: Any) -> AddHostSettings:
    if data is None:
        return AddHostSettings()
    if not isinstance(data, dict):
        raise ConfigError("'add_host' must be a mapping.")
    add_known = data.get("add_known_hosts", True)
    if not isinstance(add_known, bool):
        raise ConfigError("'add_host.add_known_hosts' must be true or false.")
    timeout = data.get("keyscan_timeout", 5)
    if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
        raise ConfigError("'add_host.keyscan_timeout' must be a positive integer.")
    return AddHostSettings(add_known_hosts=add_known, keyscan_timeout=timeout)


def _parse_path(raw: dict[str, Any], key: str, default: Path) -> Path:
    value = raw.get(key)
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{key}' must be a path string.")
    return Path(value).expanduser()


def load_settings(path: Path | None = None) -> Settings:
    """Load, validate, and return Settings from a YAML file.

    Without an explicit *path* or ``SSH_HOSTS_SETTINGS``, a missing settings
    file is not an error and built-in defaults are used.
    """
    explicit = path is not None or bool(os.environ.get(ENV_SETTINGS_VAR))
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        if explicit:
            raise ConfigError(
                f"Settings file not found at {settings_path}\n"
                f"Unset {ENV_SETTINGS_VAR} or create the file."
            )
        return Settings(ssh_config=get_ssh_config_path())

    try:
        raw = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {settings_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read {settings_path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file {settings_path} must be a YAML mapping at the top level.")

    version = raw.get("version", SUPPORTED_SETTINGS_VERSION)
    if version != SUPPORTED_SETTINGS_VERSION:
        raise ConfigError(
            f"Unsupported settings version {version}. Expected {SUPPORTED_SETTINGS_VERSION}."
        )

    ssh_config = _parse_path(raw, "ssh_config", DEFAULT_SSH_CONFIG)

    return Settings(
        version=version,
        ssh_config=get_ssh_config_path(ssh_config),
        known_hosts=_parse_path(raw, "known_hosts", DEFAULT_KNOWN_HOSTS),
        picker=_parse_picker(raw.get("picker")),
        add_host=_parse_add_host(raw.get("add_host")),
        settings_path=settings_path,
    )
