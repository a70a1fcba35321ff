"""Per-project scan configuration.

One JSON file per project directory, ``claude-code-hooks.config.json``, with
an independent section per hook package::

    {
      "secrets": {
        "mode": "warn",
        "enabledEvents": ["PreToolUse"],
        "scanGitCommit": false,
        "ignore": {"regex": []},
        "allow": {"regex": []}
      }
    }

The file is read fresh on every hook run. A missing file, a missing section
or a malformed file all resolve to defaults; hooks must never crash on
configuration.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from hookguard.install.config_merge import ConfigError, atomic_write_json, read_json_config
from hookguard.install.packages import HOOK_EVENTS
from hookguard.scan.policy import Mode
from hookguard.scan.suppression import compile_patterns

logger = structlog.get_logger(__name__)

CONFIG_FILENAME = "claude-code-hooks.config.json"


def _string_list(value: Any) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [v for v in value if isinstance(v, str)]


class PatternList(BaseModel):
    """A ``{"regex": [...]}`` block."""

    model_config = ConfigDict(extra="ignore")

    regex: list[str] = Field(default_factory=list)

    @field_validator("regex", mode="before")
    @classmethod
    def _strings_only(cls, value: Any) -> list[str]:
        return _string_list(value) or []

    def compile(self) -> list[re.Pattern[str]]:
        """Compile the valid patterns, dropping invalid ones."""
        return compile_patterns(self.regex)


class ScanConfig(BaseModel):
    """Effective configuration for one hook package."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    mode: Mode = Mode.WARN
    enabled_events: list[str] = Field(
        default_factory=lambda: list(HOOK_EVENTS),
        alias="enabledEvents",
    )
    scan_git_commit: bool = Field(default=False, alias="scanGitCommit")
    ignore: PatternList = Field(default_factory=PatternList)
    allow: PatternList = Field(default_factory=PatternList)

    @field_validator("mode", mode="before")
    @classmethod
    def _resolve_mode(cls, value: Any) -> Mode:
        return Mode.resolve(value)

    @field_validator("enabled_events", mode="before")
    @classmethod
    def _resolve_events(cls, value: Any) -> list[str]:
        events = _string_list(value)
        return list(HOOK_EVENTS) if events is None else events

    @field_validator("scan_git_commit", mode="before")
    @classmethod
    def _resolve_scan_git_commit(cls, value: Any) -> bool:
        return value if isinstance(value, bool) else False

    @field_validator("ignore", "allow", mode="before")
    @classmethod
    def _resolve_pattern_list(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}


def config_file_path(project_dir: Path) -> Path:
    """Path of the project config file."""
    return project_dir / CONFIG_FILENAME


def read_project_config(project_dir: Path) -> tuple[dict[str, Any], bool]:
    """Read the raw project config.

    Args:
        project_dir: Project root

    Returns:
        Tuple of (raw config, whether the file exists)

    Raises:
        ConfigError: If the file exists but cannot be parsed
    """
    path = config_file_path(project_dir)
    return read_json_config(path), path.exists()


def resolve_section(raw: dict[str, Any], section: str) -> ScanConfig:
    """Build the effective config for one section of a raw config."""
    data = raw.get(section) if isinstance(raw, dict) else None
    return ScanConfig.model_validate(data if isinstance(data, dict) else {})


def load_scan_config(project_dir: Path, section: str) -> ScanConfig:
    """Load the effective config for a section, falling back to defaults.

    Never raises: an unreadable config is logged and treated as absent.
    """
    try:
        raw, _exists = read_project_config(project_dir)
    except ConfigError as e:
        logger.warning("project_config.unreadable", error=str(e))
        return ScanConfig()
    return resolve_section(raw, section)


def upsert_config_section(
    raw: dict[str, Any],
    section: str,
    mode: Mode | str,
    enabled_events: list[str],
    scan_git_commit: bool | None = None,
) -> dict[str, Any]:
    """Patch the keys setup owns in one section.

    Existing allow/ignore lists, unknown keys and other sections are kept.

    Returns:
        Updated raw config (original not mutated)
    """
    result = dict(raw or {})
    existing = result.get(section)
    existing = dict(existing) if isinstance(existing, dict) else {}

    updated: dict[str, Any] = {
        **existing,
        "mode": Mode.resolve(mode).value,
        "enabledEvents": list(enabled_events),
        "ignore": existing.get("ignore") or {"regex": []},
        "allow": existing.get("allow") or {"regex": []},
    }
    if scan_git_commit is not None:
        updated["scanGitCommit"] = bool(scan_git_commit)

    result[section] = updated
    return result


def write_project_config(raw: dict[str, Any], project_dir: Path) -> Path:
    """Write the project config atomically and return its path."""
    path = config_file_path(project_dir)
    atomic_write_json(path, raw)
    return path
