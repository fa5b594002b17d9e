import os
import pytest
from envwarp.exceptions import ConfigurationError, LaunchError
from envwarp.utils.launcher import execute_command


class Replaced(Exception):
    pass


@pytest.fixture
def exec_calls(monkeypatch):
    calls = []

    def fake_execve(path, args, env):
        calls.append((path, args, env))
        raise Replaced()

    monkeypatch.setattr(os, "execve", fake_execve)
    return calls


@pytest.fixture
def bin_dir(tmp_path):
    directory = tmp_path / "bin"
    directory.mkdir()
    tool = directory / "mytool"
    tool.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    tool.chmod(0o755)
    return directory


def test_command_is_split_and_resolved(exec_calls, bin_dir):
    env = {"PATH": str(bin_dir), "MODE": "prod"}
    with pytest.raises(Replaced):
        execute_command("mytool --flag   value", env)

    (path, args, passed_env), = exec_calls
    assert path == str(bin_dir / "mytool")
    assert args == ["mytool", "--flag", "value"]
    assert passed_env == env


def test_empty_command_is_fatal(exec_calls):
    with pytest.raises(ConfigurationError, match="empty"):
        execute_command("   ", {"PATH": "/usr/bin"})
    assert exec_calls == []


def test_unknown_command_is_fatal(exec_calls, tmp_path):
    with pytest.raises(LaunchError, match="Command not found in PATH: no-such-tool"):
        execute_command("no-such-tool", {"PATH": str(tmp_path)})
    assert exec_calls == []


def test_exec_failure_is_fatal(monkeypatch, bin_dir):
    def failing_execve(path, args, env):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(os, "execve", failing_execve)
    with pytest.raises(LaunchError, match="Failed to execute command"):
        execute_command("mytool", {"PATH": str(bin_dir)})


def test_lookup_uses_search_env(exec_calls, bin_dir):
    handed_over = {"PATH": "/nonexistent"}
    with pytest.raises(Replaced):
        execute_command("mytool", handed_over, search_env={"PATH": str(bin_dir)})

    (path, _, passed_env), = exec_calls
    assert path == str(bin_dir / "mytool")
    assert passed_env == handed_over
