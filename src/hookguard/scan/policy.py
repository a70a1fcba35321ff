"""Decide hook exit status from mode, event and findings."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from hookguard.scan.models import Finding, Severity

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_BLOCKED = 2

# The only event where the security hook may block. PermissionRequest already
# puts a human in the loop, so it stays advisory.
BLOCKING_EVENT = "PreToolUse"


class Mode(str, Enum):
    """Hook runner mode."""

    WARN = "warn"
    BLOCK = "block"

    @classmethod
    def resolve(cls, value: Any) -> Mode:
        """Map a raw config or CLI value to a mode; anything unknown is warn."""
        if isinstance(value, Mode):
            return value
        if isinstance(value, str) and value.strip().lower() == cls.BLOCK.value:
            return cls.BLOCK
        return cls.WARN


@dataclass(frozen=True)
class Decision:
    """Outcome of a hook run."""

    blocked: bool
    exit_code: int
    reason: str | None = None


ALLOW = Decision(blocked=False, exit_code=EXIT_OK)


def decide_secrets(mode: Mode | str, findings: Sequence[Finding]) -> Decision:
    """Secrets policy: block mode stops only on HIGH findings."""
    if Mode.resolve(mode) is not Mode.BLOCK:
        return ALLOW
    if any(f.severity is Severity.HIGH for f in findings):
        return Decision(
            blocked=True,
            exit_code=EXIT_BLOCKED,
            reason="HIGH confidence secret",
        )
    return ALLOW


def decide_security(
    mode: Mode | str,
    event_name: str,
    findings: Sequence[Finding],
) -> Decision:
    """Security policy: block mode stops on any finding, PreToolUse only."""
    if Mode.resolve(mode) is not Mode.BLOCK or not findings:
        return ALLOW
    if event_name != BLOCKING_EVENT:
        return ALLOW
    return Decision(blocked=True, exit_code=EXIT_BLOCKED, reason="mode=block")
