"""Tests for the setup, remove and doctor commands."""

import json
from pathlib import Path

from click.testing import CliRunner

from hookguard.cli.main import cli
from hookguard.config import settings
from hookguard.install.config_merge import extract_managed_handlers
from hookguard.install.packages import HOOK_EVENTS, MODE_PATTERN, SECRETS, SECURITY
from hookguard.project_config import CONFIG_FILENAME


def _settings(project_dir: Path, name: str = "settings.json") -> dict:
    return json.loads((project_dir / ".claude" / name).read_text())


class TestSetup:
    """Tests for the setup command."""

    def test_default_project_scope(self, project_dir: Path) -> None:
        """Setup installs both events in warn mode by default."""
        result = CliRunner().invoke(cli, ["security", "setup"])

        assert result.exit_code == 0
        assert "hookguard-security setup (project, mode=warn)" in result.output
        handlers = extract_managed_handlers(
            _settings(project_dir), SECURITY.token, HOOK_EVENTS, MODE_PATTERN
        )
        assert [h.mode for h in handlers["PreToolUse"]] == ["warn"]
        assert [h.mode for h in handlers["PermissionRequest"]] == ["warn"]

    def test_mode_and_events(self, project_dir: Path) -> None:
        """--mode and --event narrow what is installed."""
        result = CliRunner().invoke(
            cli, ["secrets", "setup", "--mode", "block", "--event", "PreToolUse"]
        )

        assert result.exit_code == 0
        settings_doc = _settings(project_dir)
        assert list(settings_doc["hooks"]) == ["PreToolUse"]
        config = json.loads((project_dir / CONFIG_FILENAME).read_text())
        assert config["secrets"]["mode"] == "block"
        assert config["secrets"]["enabledEvents"] == ["PreToolUse"]

    def test_defaults_from_existing_config(self, project_dir: Path) -> None:
        """Without flags, mode and events come from the project config."""
        (project_dir / CONFIG_FILENAME).write_text(
            json.dumps({"security": {"mode": "block", "enabledEvents": ["PermissionRequest"]}})
        )

        result = CliRunner().invoke(cli, ["security", "setup"])

        assert result.exit_code == 0
        handlers = extract_managed_handlers(
            _settings(project_dir), SECURITY.token, HOOK_EVENTS, MODE_PATTERN
        )
        assert handlers["PreToolUse"] == []
        assert [h.mode for h in handlers["PermissionRequest"]] == ["block"]

    def test_scan_git_commit_flag(self, project_dir: Path) -> None:
        """--scan-git-commit is recorded in the secrets section."""
        result = CliRunner().invoke(cli, ["secrets", "setup", "--scan-git-commit"])

        assert result.exit_code == 0
        config = json.loads((project_dir / CONFIG_FILENAME).read_text())
        assert config["secrets"]["scanGitCommit"] is True

    def test_global_scope(self, project_dir: Path) -> None:
        """Global scope writes the agent's home settings."""
        result = CliRunner().invoke(cli, ["secrets", "setup", "--scope", "global"])

        assert result.exit_code == 0
        path = settings.claude_home / "settings.json"
        assert extract_managed_handlers(
            json.loads(path.read_text()), SECRETS.token, HOOK_EVENTS
        )["PreToolUse"]

    def test_project_dir_option(self, project_dir: Path, tmp_path: Path) -> None:
        """--project-dir targets another directory."""
        other = tmp_path / "other"
        other.mkdir()

        result = CliRunner().invoke(
            cli, ["security", "setup", "--scope", "projectLocal", "--project-dir", str(other)]
        )

        assert result.exit_code == 0
        assert (other / ".claude" / "settings.local.json").exists()
        assert not (project_dir / ".claude").exists()

    def test_dry_run(self, project_dir: Path) -> None:
        """--dry-run writes nothing."""
        result = CliRunner().invoke(cli, ["security", "setup", "--dry-run"])

        assert result.exit_code == 0
        assert "Would update" in result.output
        assert not (project_dir / ".claude").exists()

    def test_invalid_settings(self, project_dir: Path) -> None:
        """An unparseable settings file fails with exit 1."""
        path = project_dir / ".claude" / "settings.json"
        path.parent.mkdir()
        path.write_text("[broken")

        result = CliRunner().invoke(cli, ["security", "setup"])

        assert result.exit_code == 1
        assert "[ERROR]" in result.output
        assert path.read_text() == "[broken"

    def test_unknown_event_rejected(self, project_dir: Path) -> None:
        """Click rejects unsupported events."""
        result = CliRunner().invoke(cli, ["security", "setup", "--event", "Stop"])

        assert result.exit_code != 0
        assert not (project_dir / ".claude").exists()


class TestRemove:
    """Tests for the remove command."""

    def test_remove_keeps_other_package(self, project_dir: Path) -> None:
        """Removing one package leaves the other installed."""
        runner = CliRunner()
        runner.invoke(cli, ["security", "setup"])
        runner.invoke(cli, ["secrets", "setup"])

        result = runner.invoke(cli, ["security", "remove"])

        assert result.exit_code == 0
        assert "hookguard-security remove (project)" in result.output
        doc = _settings(project_dir)
        assert not any(extract_managed_handlers(doc, SECURITY.token, HOOK_EVENTS).values())
        assert all(extract_managed_handlers(doc, SECRETS.token, HOOK_EVENTS).values())


class TestDoctor:
    """Tests for the doctor command."""

    def test_fresh_project(self, project_dir: Path) -> None:
        """Doctor reports a missing config and no managed hooks."""
        result = CliRunner().invoke(cli, ["secrets", "doctor"])

        assert result.exit_code == 0
        assert "hookguard-secrets doctor" in result.output
        assert f"{CONFIG_FILENAME}: not found" in result.output
        assert "- mode: warn" in result.output
        assert "- scanGitCommit: false" in result.output
        assert result.output.count("no managed hooks") == 3

    def test_after_setup(self, project_dir: Path) -> None:
        """Doctor lists installed handlers with their mode."""
        runner = CliRunner()
        runner.invoke(cli, ["security", "setup", "--mode", "block"])

        result = runner.invoke(cli, ["security", "doctor"])

        assert result.exit_code == 0
        assert f"{CONFIG_FILENAME}: found" in result.output
        assert "- mode: block" in result.output
        assert "has managed hooks" in result.output
        assert "PreToolUse: 1 handler(s) mode=[block]" in result.output
        assert "DUPLICATE?" not in result.output
        assert "scanGitCommit" not in result.output

    def test_duplicates_flagged(self, project_dir: Path) -> None:
        """Two managed handlers for one event are flagged."""
        command = SECURITY.build_command("PreToolUse", "warn")
        group = {"matcher": "*", "hooks": [{"type": "command", "command": command}]}
        path = project_dir / ".claude" / "settings.json"
        path.parent.mkdir()
        path.write_text(json.dumps({"hooks": {"PreToolUse": [group, group]}}))

        result = CliRunner().invoke(cli, ["security", "doctor"])

        assert result.exit_code == 0
        assert "2 handler(s)" in result.output
        assert "DUPLICATE?" in result.output
        assert "Tip: re-run setup or remove" in result.output

    def test_errors_are_reported(self, project_dir: Path) -> None:
        """Unreadable files are reported, not raised."""
        (project_dir / CONFIG_FILENAME).write_text("{oops")
        path = project_dir / ".claude" / "settings.local.json"
        path.parent.mkdir()
        path.write_text("{oops")

        result = CliRunner().invoke(cli, ["security", "doctor"])

        assert result.exit_code == 0
        assert "- parse: error" in result.output
        assert "ERROR" in result.output
