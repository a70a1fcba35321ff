"""Managed hook packages.

Each package owns the handlers whose command embeds its ownership token.
Commands are a pure function of (package, event, mode), so the token always
identifies exactly the handlers the package wrote.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from hookguard.install.config_merge import apply_for_events, remove_managed
from hookguard.scan.policy import Mode

HOOK_EVENTS: tuple[str, ...] = ("PreToolUse", "PermissionRequest")

EXECUTABLE = "hookguard"

MODE_PATTERN = re.compile(r"--mode\s+(warn|block)\b")


@dataclass(frozen=True)
class ManagedPackage:
    """A hook package that installs handlers into settings.json."""

    name: str
    events: tuple[str, ...] = HOOK_EVENTS
    matcher: str = "*"
    async_: bool = False
    timeout: int = 8

    @property
    def token(self) -> str:
        """Ownership marker embedded in every managed command."""
        return f"--managed-by {EXECUTABLE}-{self.name}"

    @property
    def label(self) -> str:
        """Display name used in hook reports."""
        return f"{EXECUTABLE}-{self.name}"

    def validate_event(self, event_name: Any) -> str:
        """Return event_name if this package supports it.

        Raises:
            ValueError: If the event is not supported
        """
        if not isinstance(event_name, str) or event_name not in self.events:
            raise ValueError(f"Invalid event name: {event_name!r}")
        return event_name

    def build_command(self, event_name: str, mode: Mode | str = Mode.WARN) -> str:
        """Build the handler command for an event.

        Raises:
            ValueError: If the event is not supported
        """
        self.validate_event(event_name)
        safe_mode = Mode.resolve(mode).value
        return f"{EXECUTABLE} {self.name} run --event {event_name} --mode {safe_mode} {self.token}"

    def apply_to_settings(
        self,
        settings: dict[str, Any],
        enabled_events: Iterable[str],
        mode: Mode | str = Mode.WARN,
    ) -> dict[str, Any]:
        """Install handlers for the enabled events, replacing earlier ones.

        Events this package does not support are skipped.
        """
        events = [e for e in enabled_events if e in self.events]
        return apply_for_events(
            settings,
            self.token,
            events,
            lambda event_name: self.build_command(event_name, mode),
            matcher=self.matcher,
            async_=self.async_,
            timeout=self.timeout,
        )

    def remove_from_settings(self, settings: dict[str, Any]) -> dict[str, Any]:
        """Strip every handler this package installed."""
        return remove_managed(settings, self.token)


SECURITY = ManagedPackage(name="security")
SECRETS = ManagedPackage(name="secrets")

PACKAGES: dict[str, ManagedPackage] = {
    SECURITY.name: SECURITY,
    SECRETS.name: SECRETS,
}
