"""Setup and removal of managed hooks.

Coordinates reading the scoped settings file, merging managed handlers and
writing the settings and project config back.
"""

from __future__ import annotations

from typing import Any

import structlog

from hookguard.install import SetupOptions, SetupResult, SetupStep
from hookguard.install.config_merge import (
    ConfigError,
    atomic_write_json,
    read_json_config,
    settings_path_for_scope,
)
from hookguard.install.packages import ManagedPackage
from hookguard.project_config import (
    config_file_path,
    read_project_config,
    upsert_config_section,
    write_project_config,
)

logger = structlog.get_logger(__name__)


def _read_settings(
    options: SetupOptions,
    result: SetupResult,
) -> dict[str, Any] | None:
    path = settings_path_for_scope(options.scope, options.project_dir)
    result.settings_path = path
    try:
        current = read_json_config(path)
    except ConfigError as e:
        result.add_error(SetupStep.READ_SETTINGS, str(e))
        return None
    result.add_completed(SetupStep.READ_SETTINGS, f"Read {path}")
    return current


def _write_settings(
    updated: dict[str, Any],
    options: SetupOptions,
    result: SetupResult,
) -> bool:
    path = result.settings_path
    assert path is not None
    if options.dry_run:
        result.add_completed(SetupStep.WRITE_SETTINGS, f"Would update {path}")
        return True
    try:
        atomic_write_json(path, updated)
    except ConfigError as e:
        result.add_error(SetupStep.WRITE_SETTINGS, str(e))
        return False
    result.add_completed(SetupStep.WRITE_SETTINGS, f"Updated {path}")
    return True


def run_setup(package: ManagedPackage, options: SetupOptions) -> SetupResult:
    """Install a package's managed hooks for the selected scope.

    Re-running with the same options leaves the settings file unchanged.

    Args:
        package: Package to install
        options: Scope, mode and events

    Returns:
        SetupResult with status and the files touched
    """
    result = SetupResult()
    events = list(package.events) if options.enabled_events is None else options.enabled_events
    for event_name in events:
        package.validate_event(event_name)

    current = _read_settings(options, result)
    if current is None:
        return result

    updated = package.apply_to_settings(current, events, options.mode)
    if not _write_settings(updated, options, result):
        return result

    result.config_path = config_file_path(options.project_dir)
    try:
        raw, _exists = read_project_config(options.project_dir)
        patched = upsert_config_section(
            raw,
            package.name,
            options.mode,
            events,
            scan_git_commit=options.scan_git_commit,
        )
        if options.dry_run:
            message = f"Would update {result.config_path}"
        else:
            write_project_config(patched, options.project_dir)
            message = f"Updated {result.config_path}"
    except ConfigError as e:
        result.add_error(SetupStep.WRITE_PROJECT_CONFIG, str(e))
        return result
    result.add_completed(SetupStep.WRITE_PROJECT_CONFIG, message)

    logger.info(
        "setup.applied",
        package=package.name,
        scope=options.scope,
        events=events,
        dry_run=options.dry_run,
    )
    return result


def run_remove(package: ManagedPackage, options: SetupOptions) -> SetupResult:
    """Remove a package's managed hooks from the selected scope.

    The project config is left as it is.
    """
    result = SetupResult()
    current = _read_settings(options, result)
    if current is None:
        return result

    updated = package.remove_from_settings(current)
    _write_settings(updated, options, result)
    logger.info("setup.removed", package=package.name, scope=options.scope)
    return result
