"""Tests for the ssh-menu CLI."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ssh_hosts.menu_cli import app

runner = CliRunner()

CONFIG = textwrap.dedent("""\
    Host *
        ForwardAgent no

    Host web-prod
        HostName 1.2.3.4

    Host bastion
        HostName 5.6.7.8
""")


@pytest.fixture()
def ssh_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, isolated_settings: Path) -> Path:
    p = tmp_path / "config"
    p.write_text(CONFIG)
    monkeypatch.setenv("SSH_CONFIG", str(p))
    isolated_settings.write_text("version: 1\npicker:\n  command: ssh-hosts-no-such-finder\n")
    return p


class Launcher:
    """Records commands instead of running them."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.code = 0

    def __call__(self, cmd, *, preview=True):
        self.calls.append(cmd)
        return self.code


@pytest.fixture()
def launched(monkeypatch: pytest.MonkeyPatch) -> Launcher:
    launcher = Launcher()
    monkeypatch.setattr("ssh_hosts.executor.run_interactive", launcher)
    return launcher


class TestMenu:
    def test_help(self):
        result = runner.invoke(app, ["-h"])
        assert result.exit_code == 0
        assert "--sftp" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "ssh-hosts" in result.output

    def test_missing_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SSH_CONFIG", str(tmp_path / "missing"))
        result = runner.invoke(app, [])
        assert result.exit_code == 1
        assert "No readable SSH config" in result.output

    def test_print(self, ssh_config: Path, launched):
        result = runner.invoke(app, ["--print"], input="2\n")
        assert result.exit_code == 0
        assert result.output.strip().endswith("web-prod")
        assert "1) bastion" in result.output
        assert launched.calls == []

    def test_undecodable_comment(self, ssh_config: Path, launched):
        ssh_config.write_bytes(b"# caf\xe9\n" + CONFIG.encode())
        result = runner.invoke(app, ["--print"], input="1\n")
        assert result.exit_code == 0, result.output
        assert result.output.strip().endswith("bastion")

    def test_connect_with_passthrough(self, ssh_config: Path, launched):
        result = runner.invoke(app, ["--", "-L", "8080:localhost:80"], input="1\n")
        assert result.exit_code == 0
        assert launched.calls == [["ssh", "bastion", "-L", "8080:localhost:80"]]

    def test_unknown_options_pass_through(self, ssh_config: Path, launched):
        result = runner.invoke(app, ["-v"], input="1\n")
        assert result.exit_code == 0
        assert launched.calls == [["ssh", "bastion", "-v"]]

    def test_sftp(self, ssh_config: Path, launched):
        result = runner.invoke(app, ["--sftp"], input="2\n")
        assert result.exit_code == 0
        assert launched.calls == [["sftp", "web-prod"]]

    def test_child_exit_code_propagated(self, ssh_config: Path, launched):
        launched.code = 255
        result = runner.invoke(app, [], input="1\n")
        assert result.exit_code == 255

    @pytest.mark.parametrize("answer", ["9\n", "abc\n", "\n"])
    def test_invalid_choice(self, ssh_config: Path, launched, answer: str):
        result = runner.invoke(app, [], input=answer)
        assert result.exit_code == 1
        assert "No host selected." in result.output
        assert launched.calls == []

    def test_no_hosts(self, ssh_config: Path, launched):
        ssh_config.write_text("Host *\n    User root\n")
        result = runner.invoke(app, [], input="1\n")
        assert result.exit_code == 1
        assert "No host selected." in result.output

    def test_fuzzy_finder(self, ssh_config: Path, launched, monkeypatch: pytest.MonkeyPatch, make_runner):
        fake = make_runner(0, "web-prod\n")
        monkeypatch.setattr("ssh_hosts.selector.find_fuzzy_finder", lambda picker: ["fzf"])
        monkeypatch.setattr("ssh_hosts.executor.SubprocessRunner", lambda: fake)
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert fake.calls[0]["input_text"] == "bastion\nweb-prod"
        assert launched.calls == [["ssh", "web-prod"]]

    def test_fuzzy_finder_cancelled(self, ssh_config: Path, launched, monkeypatch: pytest.MonkeyPatch, make_runner):
        monkeypatch.setattr("ssh_hosts.selector.find_fuzzy_finder", lambda picker: ["fzf"])
        monkeypatch.setattr("ssh_hosts.executor.SubprocessRunner", lambda: make_runner(130, ""))
        result = runner.invoke(app, [])
        assert result.exit_code == 1
        assert launched.calls == []

    def test_bad_settings(self, ssh_config: Path, isolated_settings: Path):
        isolated_settings.write_text("version: 7\n")
        result = runner.invoke(app, [])
        assert result.exit_code == 1
        assert "Unsupported settings version" in result.output
