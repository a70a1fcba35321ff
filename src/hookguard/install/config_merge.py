"""JSON settings merging utilities.

Provides safe JSON settings reading, atomic writing, and the merge engine that
adds and removes managed hook handlers.

A handler is *managed* by a package when its ``command`` contains that
package's ownership token. The engine only ever touches managed handlers of
the token it is given; every other event, group and handler is kept as-is and
in order.

No locking is done: two processes rewriting the same settings file race, and
the last writer wins.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import structlog

from hookguard.config import settings as app_settings

logger = structlog.get_logger(__name__)


class ConfigError(Exception):
    """Error during settings manipulation."""

    pass


class Scope(str, Enum):
    """Which settings file managed hooks are written to."""

    GLOBAL = "global"
    PROJECT = "project"
    PROJECT_LOCAL = "projectLocal"


def settings_path_for_scope(scope: Scope | str, project_dir: Path) -> Path:
    """Resolve the settings.json path for a scope.

    Args:
        scope: global, project or projectLocal
        project_dir: Project root (ignored for global scope)

    Returns:
        Path to the settings file

    Raises:
        ValueError: If scope is unknown
    """
    scope = Scope(scope)
    if scope is Scope.GLOBAL:
        return app_settings.claude_home / "settings.json"
    if scope is Scope.PROJECT:
        return project_dir / ".claude" / "settings.json"
    return project_dir / ".claude" / "settings.local.json"


def read_json_config(path: Path) -> dict[str, Any]:
    """Read JSON config file, returning an empty dict if missing.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict

    Raises:
        ConfigError: If file exists but is unreadable or invalid JSON
    """
    if not path.exists():
        return {}

    try:
        content = path.read_text(encoding="utf-8")
        if not content.strip():
            return {}
        data = json.loads(content)
        if not isinstance(data, dict):
            raise ConfigError(
                f"Invalid JSON in {path}: expected object, got {type(data).__name__}"
            )
        return data
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e


def atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    """Write JSON atomically (write temp, rename).

    Args:
        path: Target path
        data: Data to write

    Raises:
        ConfigError: If write fails
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"Cannot create directory {path.parent}: {e}") from e

    # Same directory for the temp file: rename must stay on one filesystem
    try:
        temp_fd, temp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
    except OSError as e:
        raise ConfigError(f"Cannot create temp file in {path.parent}: {e}") from e

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, path)
    except Exception as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise ConfigError(f"Failed to write {path}: {e}") from e

    logger.info("settings.written", path=str(path))


def is_managed_command(command: Any, token: str) -> bool:
    """Check whether a handler command carries the ownership token."""
    return isinstance(command, str) and isinstance(token, str) and token in command


def _is_managed_handler(handler: Any, token: str) -> bool:
    return isinstance(handler, dict) and is_managed_command(handler.get("command"), token)


def remove_managed(settings: dict[str, Any], token: str) -> dict[str, Any]:
    """Remove every handler owned by token.

    Groups, events and the ``hooks`` key are dropped only when removal left
    them empty. Anything without a managed handler is returned untouched.

    Args:
        settings: Existing settings.json content
        token: Ownership token

    Returns:
        Updated settings dict (original not mutated)
    """
    result = dict(settings or {})
    hooks = result.get("hooks")
    if not isinstance(hooks, dict):
        return result

    new_hooks: dict[str, Any] = {}
    removed_any = False
    for event_name, groups in hooks.items():
        if not isinstance(groups, list):
            new_hooks[event_name] = groups
            continue

        kept_groups: list[Any] = []
        event_changed = False
        for group in groups:
            handlers = group.get("hooks") if isinstance(group, dict) else None
            if not isinstance(handlers, list):
                kept_groups.append(group)
                continue
            kept = [h for h in handlers if not _is_managed_handler(h, token)]
            if len(kept) == len(handlers):
                kept_groups.append(group)
                continue
            event_changed = True
            if kept:
                kept_groups.append({**group, "hooks": kept})

        if event_changed:
            removed_any = True
            if kept_groups:
                new_hooks[event_name] = kept_groups
        else:
            new_hooks[event_name] = groups

    if not removed_any:
        return result

    if new_hooks:
        result["hooks"] = new_hooks
    else:
        del result["hooks"]
    return result


def add_managed(
    settings: dict[str, Any],
    event_name: str,
    command: str,
    matcher: str = "*",
    async_: bool = False,
    timeout: int = 8,
) -> dict[str, Any]:
    """Append one hook group holding a single command handler.

    Existing groups for the event are kept; the new group goes last.

    Args:
        settings: Existing settings.json content
        event_name: Hook event to register under
        command: Handler command (should embed the ownership token)
        matcher: Tool matcher for the group
        async_: Whether the agent runs the handler asynchronously
        timeout: Handler timeout in seconds

    Returns:
        Updated settings dict (original not mutated)
    """
    result = dict(settings or {})
    existing_hooks = result.get("hooks")
    hooks = dict(existing_hooks) if isinstance(existing_hooks, dict) else {}

    handler = {
        "type": "command",
        "command": command,
        "async": bool(async_),
        "timeout": timeout,
    }
    group = {"matcher": matcher, "hooks": [handler]}

    groups = hooks.get(event_name)
    hooks[event_name] = [*groups, group] if isinstance(groups, list) else [group]
    result["hooks"] = hooks
    return result


def apply_for_events(
    settings: dict[str, Any],
    token: str,
    enabled_events: Iterable[str],
    build_command: Callable[[str], str],
    matcher: str = "*",
    async_: bool = False,
    timeout: int = 8,
) -> dict[str, Any]:
    """Replace this token's handlers with one per enabled event.

    Stale managed handlers are removed first, so repeated runs with the same
    input produce the same document.

    Args:
        settings: Existing settings.json content
        token: Ownership token
        enabled_events: Events to register, in order
        build_command: Maps an event name to its handler command
        matcher: Tool matcher for each group
        async_: Whether handlers run asynchronously
        timeout: Handler timeout in seconds

    Returns:
        Updated settings dict (original not mutated)
    """
    result = remove_managed(settings, token)
    for event_name in enabled_events:
        result = add_managed(
            result,
            event_name,
            build_command(event_name),
            matcher=matcher,
            async_=async_,
            timeout=timeout,
        )
    return result


@dataclass(frozen=True)
class ManagedHandler:
    """A managed handler found in a settings document."""

    command: str
    mode: str | None = None


def extract_managed_handlers(
    settings: dict[str, Any],
    token: str,
    events: Iterable[str],
    mode_pattern: re.Pattern[str] | None = None,
) -> dict[str, list[ManagedHandler]]:
    """Collect managed handlers per event.

    Args:
        settings: settings.json content
        token: Ownership token
        events: Events to inspect
        mode_pattern: Regex whose first group extracts the mode from a command

    Returns:
        Mapping of event name to its managed handlers (possibly empty)
    """
    hooks = settings.get("hooks") if isinstance(settings, dict) else None
    by_event: dict[str, list[ManagedHandler]] = {}
    for event_name in events:
        found: list[ManagedHandler] = []
        groups = hooks.get(event_name) if isinstance(hooks, dict) else None
        for group in groups if isinstance(groups, list) else []:
            handlers = group.get("hooks") if isinstance(group, dict) else None
            for handler in handlers if isinstance(handlers, list) else []:
                if not _is_managed_handler(handler, token):
                    continue
                command = handler["command"]
                match = mode_pattern.search(command) if mode_pattern else None
                found.append(ManagedHandler(command=command, mode=match.group(1) if match else None))
        by_event[event_name] = found
    return by_event
