"""Shared fixtures: isolated settings and a scripted command runner."""

from __future__ import annotations

from pathlib import Path

import pytest


class FakeRunner:
    """Stands in for SubprocessRunner; records calls and replays one result."""

    def __init__(self, code: int = 0, out: str = "") -> None:
        self.code = code
        self.out = out
        self.calls: list[dict] = []

    def capture(self, cmd, *, input_text=None, timeout=None, show_stderr=False):
        self.calls.append(
            {"cmd": cmd, "input_text": input_text, "timeout": timeout, "show_stderr": show_stderr}
        )
        return self.code, self.out


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every test at an empty settings file and no SSH_CONFIG override."""
    settings = tmp_path / "settings.yaml"
    settings.write_text("version: 1\n")
    monkeypatch.setenv("SSH_HOSTS_SETTINGS", str(settings))
    monkeypatch.delenv("SSH_CONFIG", raising=False)
    return settings


@pytest.fixture()
def make_runner():
    return FakeRunner
