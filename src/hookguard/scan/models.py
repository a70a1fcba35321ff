"""Data models for payload and file scanning."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    """Finding severity.

    HIGH is reserved for unambiguous high-impact material and is the only
    severity the secrets hook blocks on.
    """

    HIGH = "HIGH"
    MED = "MED"


@dataclass(frozen=True)
class PatternRule:
    """A named detection rule.

    The rule fires when ``pattern`` and every pattern in ``requires`` match
    somewhere in the scanned text. ``title`` and ``detail`` are display-only.
    """

    id: str
    pattern: re.Pattern[str]
    severity: Severity
    title: str
    detail: str
    requires: tuple[re.Pattern[str], ...] = ()

    def matches(self, text: str) -> bool:
        """Check whether this rule fires on text."""
        if not self.pattern.search(text):
            return False
        return all(rx.search(text) for rx in self.requires)


@dataclass(frozen=True)
class Finding:
    """One rule that fired during a scan."""

    id: str
    severity: Severity
    title: str
    detail: str
    file_path: str | None = None

    @classmethod
    def from_rule(cls, rule: PatternRule, file_path: str | None = None) -> Finding:
        """Build a finding for rule, tagging the detail with file_path if given."""
        detail = rule.detail
        if file_path is not None:
            detail = f"{detail} (in staged file: {file_path})"
        return cls(
            id=rule.id,
            severity=rule.severity,
            title=rule.title,
            detail=detail,
            file_path=file_path,
        )


@dataclass
class Assessment:
    """Result of scanning one hook payload."""

    event_name: str
    findings: list[Finding] = field(default_factory=list)
    suppressed: str | None = None
    text: str = ""

    @property
    def has_high(self) -> bool:
        """True if any finding is HIGH severity."""
        return any(f.severity is Severity.HIGH for f in self.findings)
