"""Tests for the ai-hooks CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from ai_hooks.adapters.claude_code import RUNNER_PATH, SETTINGS_PATH, ClaudeCodeAdapter
from ai_hooks.cli.main import cli
from ai_hooks.config.loader import CONFIG_TEMPLATE, ENV_SETTINGS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_SETTINGS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(ClaudeCodeAdapter, "command_exists", staticmethod(lambda c: False))


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "ai_hooks_config.py").write_text(CONFIG_TEMPLATE, encoding="utf-8")
    return tmp_path


class TestInit:
    def test_creates_config(self, runner, tmp_path: Path):
        result = runner.invoke(cli, ["--cwd", str(tmp_path), "init"])
        assert result.exit_code == 0
        assert "Created ai_hooks_config.py" in result.output
        assert (tmp_path / "ai_hooks_config.py").read_text(encoding="utf-8") == CONFIG_TEMPLATE

    def test_existing_config(self, runner, project: Path):
        result = runner.invoke(cli, ["--cwd", str(project), "init"])
        assert result.exit_code == 0
        assert "Config already exists" in result.output

    def test_dry_run(self, runner, tmp_path: Path):
        result = runner.invoke(cli, ["--cwd", str(tmp_path), "init", "--dry-run"])
        assert result.exit_code == 0
        assert "[dry-run]" in result.output
        assert not (tmp_path / "ai_hooks_config.py").exists()


class TestDetect:
    def test_nothing_detected(self, runner, tmp_path: Path):
        result = runner.invoke(cli, ["--cwd", str(tmp_path), "detect"])
        assert result.exit_code == 0
        assert "Detected 0/1 tools" in result.output

    def test_claude_directory(self, runner, tmp_path: Path):
        (tmp_path / ".claude").mkdir()
        result = runner.invoke(cli, ["--cwd", str(tmp_path), "detect"])
        assert result.exit_code == 0
        assert "Detected 1/1 tools" in result.output
        assert "ai-hooks init" in result.output


class TestGenerateInstall:
    def test_generate_dry_run(self, runner, project: Path):
        result = runner.invoke(
            cli, ["--cwd", str(project), "generate", "--tools", "claude-code", "--dry-run"],
        )
        assert result.exit_code == 0
        assert f"Would write: {RUNNER_PATH}" in result.output
        assert not (project / RUNNER_PATH).exists()

    def test_install_writes_files(self, runner, project: Path):
        result = runner.invoke(cli, ["--cwd", str(project), "install", "--tools", "claude-code"])
        assert result.exit_code == 0
        assert "Hooks installed!" in result.output
        assert (project / RUNNER_PATH).is_file()
        settings = json.loads((project / SETTINGS_PATH).read_text(encoding="utf-8"))
        assert "PreToolUse" in settings["hooks"]

    def test_install_nothing_detected(self, runner, project: Path):
        result = runner.invoke(cli, ["--cwd", str(project), "install"])
        assert result.exit_code == 0
        assert "No AI tools detected" in result.output

    def test_unknown_tool_warns(self, runner, project: Path):
        result = runner.invoke(cli, ["--cwd", str(project), "install", "--tools", "cursor"])
        assert result.exit_code == 0
        assert "Unknown adapter 'cursor'" in result.output

    def test_missing_config_fails(self, runner, tmp_path: Path):
        result = runner.invoke(cli, ["--cwd", str(tmp_path), "generate", "--tools", "claude-code"])
        assert result.exit_code == 1
        assert "No ai-hooks config found" in result.output

    def test_uninstall(self, runner, project: Path):
        runner.invoke(cli, ["--cwd", str(project), "install", "--tools", "claude-code"])
        result = runner.invoke(cli, ["--cwd", str(project), "uninstall", "--tools", "claude-code"])
        assert result.exit_code == 0
        assert "Removed from Claude Code" in result.output
        assert not (project / RUNNER_PATH).exists()


class TestListAndStatus:
    def test_list(self, runner, project: Path, monkeypatch):
        monkeypatch.setenv("COLUMNS", "200")
        result = runner.invoke(cli, ["--cwd", str(project), "list", "--verbose"])
        assert result.exit_code == 0
        assert "4 hook(s) registered" in result.output
        assert "ai-hooks:block-dangerous-commands" in result.output

    def test_list_empty(self, runner, tmp_path: Path):
        (tmp_path / "ai_hooks_config.py").write_text(
            "from ai_hooks import define_config\nconfig = define_config()\n", encoding="utf-8",
        )
        result = runner.invoke(cli, ["--cwd", str(tmp_path), "list"])
        assert result.exit_code == 0
        assert "No hooks registered" in result.output

    def test_status(self, runner, project: Path):
        result = runner.invoke(cli, ["--cwd", str(project), "status"])
        assert result.exit_code == 0
        assert "4 registered (3 before, 1 after)" in result.output
        assert "fail-open, timeout 5000ms" in result.output

    def test_status_without_config(self, runner, tmp_path: Path):
        result = runner.invoke(cli, ["--cwd", str(tmp_path), "status"])
        assert result.exit_code == 0
        assert "Config: not found" in result.output


class TestRun:
    def test_run_blocks(self, runner, project: Path):
        payload = json.dumps({
            "hook_event_name": "PreToolUse",
            "tool_name": "Bash",
            "tool_input": {"command": "rm -rf /"},
        })
        result = runner.invoke(cli, ["--cwd", str(project), "run", "claude-code"], input=payload)
        assert result.exit_code == 2
