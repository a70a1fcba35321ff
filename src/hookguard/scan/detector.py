"""Run a rule registry against text."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from hookguard.scan.models import Finding, PatternRule

logger = structlog.get_logger(__name__)


def detect(text: str, rules: Sequence[PatternRule]) -> list[Finding]:
    """Return one finding per rule that fires on text.

    Findings keep registry order. A rule id listed twice in a registry is
    reported once, by its first rule.

    Args:
        text: Flattened text to scan
        rules: Ordered rule registry

    Returns:
        Deduplicated findings
    """
    text = text or ""
    findings: list[Finding] = []
    seen: set[str] = set()
    for rule in rules:
        if rule.id in seen:
            continue
        if rule.matches(text):
            seen.add(rule.id)
            findings.append(Finding.from_rule(rule))
    if findings:
        logger.debug("scan.detected", ids=[f.id for f in findings])
    return findings


def detect_in_files(
    contents: Iterable[tuple[str, str]],
    rules: Sequence[PatternRule],
) -> list[Finding]:
    """Scan several files, deduplicating by (rule id, file path).

    The same rule firing in two files yields two findings.

    Args:
        contents: (file_path, text) pairs in scan order
        rules: Ordered rule registry

    Returns:
        Findings concatenated across files, each tagged with its file path
    """
    findings: list[Finding] = []
    seen: set[tuple[str, str]] = set()
    for file_path, text in contents:
        for rule in rules:
            key = (rule.id, file_path)
            if key in seen or not rule.matches(text):
                continue
            seen.add(key)
            findings.append(Finding.from_rule(rule, file_path=file_path))
    if findings:
        logger.debug("scan.detected_in_files", count=len(findings))
    return findings
