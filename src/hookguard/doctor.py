"""Inspect project config and installed managed hooks."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from hookguard.install.config_merge import (
    ConfigError,
    ManagedHandler,
    Scope,
    extract_managed_handlers,
    read_json_config,
    settings_path_for_scope,
)
from hookguard.install.packages import MODE_PATTERN, ManagedPackage
from hookguard.project_config import (
    ScanConfig,
    config_file_path,
    read_project_config,
    resolve_section,
)


@dataclass
class ScopeReport:
    """Managed handlers found in one settings file."""

    scope: Scope
    path: Path
    error: str | None = None
    handlers: dict[str, list[ManagedHandler]] = field(default_factory=dict)

    @property
    def has_managed(self) -> bool:
        """True if any event has a managed handler."""
        return any(self.handlers.values())

    @property
    def duplicate_events(self) -> list[str]:
        """Events with more than one managed handler."""
        return [event for event, found in self.handlers.items() if len(found) > 1]


@dataclass
class DoctorReport:
    """Everything the doctor command prints."""

    project_dir: Path
    config_path: Path
    config_exists: bool = False
    config_error: str | None = None
    effective: ScanConfig | None = None
    scopes: list[ScopeReport] = field(default_factory=list)


def inspect(package: ManagedPackage, project_dir: Path) -> DoctorReport:
    """Collect the config and settings state for a package.

    Unreadable files are reported, not raised.
    """
    report = DoctorReport(
        project_dir=project_dir,
        config_path=config_file_path(project_dir),
    )
    try:
        raw, report.config_exists = read_project_config(project_dir)
        report.effective = resolve_section(raw, package.name)
    except ConfigError as e:
        report.config_exists = True
        report.config_error = str(e)

    for scope in Scope:
        path = settings_path_for_scope(scope, project_dir)
        scope_report = ScopeReport(scope=scope, path=path)
        try:
            settings = read_json_config(path)
        except ConfigError as e:
            scope_report.error = str(e)
        else:
            scope_report.handlers = extract_managed_handlers(
                settings,
                package.token,
                package.events,
                mode_pattern=MODE_PATTERN,
            )
        report.scopes.append(scope_report)
    return report
