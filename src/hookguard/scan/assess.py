"""Flatten, detect and suppress in one call."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from hookguard.scan.detector import detect
from hookguard.scan.flatten import flatten
from hookguard.scan.models import Assessment, Finding, PatternRule
from hookguard.scan.suppression import suppress


def assess(
    event_name: str,
    payload: Any,
    rules: Sequence[PatternRule],
    allow: Sequence[re.Pattern[str]] = (),
    ignore: Sequence[re.Pattern[str]] = (),
    extra_findings: Sequence[Finding] = (),
) -> Assessment:
    """Scan a hook payload.

    Args:
        event_name: Hook event that fired (carried through for reporting)
        payload: Parsed stdin payload
        rules: Registry to scan with
        allow: Compiled allow patterns
        ignore: Compiled ignore patterns
        extra_findings: Findings from other sources (staged files), subject to
            the same suppression

    Returns:
        Assessment with the surviving findings and suppression tag
    """
    text = flatten(payload)
    findings = detect(text, rules) + list(extra_findings)
    result = suppress(findings, text, allow, ignore)
    return Assessment(
        event_name=event_name,
        findings=result.findings,
        suppressed=result.suppressed,
        text=text,
    )
