"""Allow/ignore suppression of findings.

Users list regexes in the project config. A matching ``allow`` pattern
silences findings entirely; a matching ``ignore`` pattern drops them but the
hook still prints a dim note. Allow wins when both match.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

import structlog

from hookguard.scan.models import Finding

logger = structlog.get_logger(__name__)

SuppressionTag = Literal["allow", "ignore"]


@dataclass
class SuppressionResult:
    """Findings left after suppression, and which list suppressed them."""

    findings: list[Finding] = field(default_factory=list)
    suppressed: SuppressionTag | None = None


def compile_patterns(sources: Iterable[Any] | None) -> list[re.Pattern[str]]:
    """Compile regex sources one by one, dropping invalid entries.

    Args:
        sources: Regex source strings from config (non-strings are skipped)

    Returns:
        Successfully compiled patterns, in input order
    """
    compiled: list[re.Pattern[str]] = []
    for source in sources or ():
        if not isinstance(source, str):
            continue
        try:
            compiled.append(re.compile(source))
        except re.error as e:
            logger.debug("suppression.invalid_pattern", pattern=source, error=str(e))
    return compiled


def _any_match(patterns: Sequence[re.Pattern[str]], text: str) -> bool:
    return any(rx.search(text) for rx in patterns)


def suppress(
    findings: list[Finding],
    text: str,
    allow: Sequence[re.Pattern[str]],
    ignore: Sequence[re.Pattern[str]],
) -> SuppressionResult:
    """Apply allow/ignore patterns to a scan result.

    Args:
        findings: Findings from detection
        text: The flattened text the findings came from
        allow: Compiled allow patterns
        ignore: Compiled ignore patterns

    Returns:
        SuppressionResult; an empty findings list is returned untagged
    """
    if not findings:
        return SuppressionResult(findings=[], suppressed=None)

    if _any_match(allow, text):
        logger.debug("suppression.applied", tag="allow", count=len(findings))
        return SuppressionResult(findings=[], suppressed="allow")

    if _any_match(ignore, text):
        logger.debug("suppression.applied", tag="ignore", count=len(findings))
        return SuppressionResult(findings=[], suppressed="ignore")

    return SuppressionResult(findings=list(findings), suppressed=None)
