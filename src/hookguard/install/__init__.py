"""hookguard Install Module.

Writes and removes managed hook handlers in agent settings files and keeps
the project config section in step with them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal


class SetupStep(str, Enum):
    """Setup steps for progress tracking."""

    READ_SETTINGS = "read_settings"
    WRITE_SETTINGS = "write_settings"
    WRITE_PROJECT_CONFIG = "write_project_config"


@dataclass
class SetupResult:
    """Result of a setup or remove run."""

    status: Literal["success", "failed"] = "success"
    settings_path: Path | None = None
    config_path: Path | None = None
    steps_completed: list[SetupStep] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def add_completed(self, step: SetupStep, message: str) -> None:
        """Mark a step as completed."""
        self.steps_completed.append(step)
        self.messages.append(message)

    def add_error(self, step: SetupStep, error: str) -> None:
        """Record an error for a step."""
        self.errors.append(f"{step.value}: {error}")
        self.status = "failed"


@dataclass
class SetupOptions:
    """Options controlling setup behavior."""

    scope: str = "project"
    project_dir: Path = field(default_factory=Path.cwd)
    mode: str = "warn"
    enabled_events: list[str] | None = None  # None: every supported event
    scan_git_commit: bool | None = None  # None: leave the config value alone
    dry_run: bool = False


__all__ = [
    "SetupOptions",
    "SetupResult",
    "SetupStep",
]
