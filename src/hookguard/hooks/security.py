"""Security hook: warn about or block risky shell commands.

Input (stdin): {"tool_name": "Bash", "tool_input": {"command": "rm -rf /"}}
Output (stderr): findings report; exit 2 only in block mode on PreToolUse
"""

from __future__ import annotations

from typing import Any

import click
import structlog

from hookguard.hooks.report import render_block, render_report
from hookguard.install.packages import SECURITY
from hookguard.project_config import ScanConfig
from hookguard.scan.assess import assess
from hookguard.scan.models import Assessment
from hookguard.scan.patterns import RISK_RULES
from hookguard.scan.policy import Decision, Mode, decide_security

logger = structlog.get_logger(__name__)

TIP = (
    "Note: This is heuristic-only. It may miss risks or flag false positives. "
    "Configure warn vs block in setup."
)


def assess_risk(event_name: str, payload: Any, config: ScanConfig) -> Assessment:
    """Scan a payload with the risk rules and the configured suppression lists."""
    return assess(
        event_name,
        payload,
        RISK_RULES,
        allow=config.allow.compile(),
        ignore=config.ignore.compile(),
    )


def run_hook(
    event_name: str,
    payload: Any,
    config: ScanConfig,
    mode: Mode | None = None,
) -> Decision:
    """Run the security hook for one payload.

    Args:
        event_name: Hook event that fired
        payload: Parsed stdin payload
        config: Effective project config
        mode: Mode override (defaults to the config mode)

    Returns:
        Decision carrying the exit code
    """
    SECURITY.validate_event(event_name)
    effective_mode = mode or config.mode
    assessment = assess_risk(event_name, payload, config)

    # allow-suppressed runs stay silent; ignore leaves a dim note
    if assessment.findings or assessment.suppressed == "ignore":
        click.echo(
            render_report(SECURITY.label, assessment, effective_mode, "risk", TIP),
            err=True,
        )

    decision = decide_security(effective_mode, event_name, assessment.findings)
    logger.debug(
        "hook.decided",
        package=SECURITY.name,
        hook_event=event_name,
        findings=len(assessment.findings),
        suppressed=assessment.suppressed,
        blocked=decision.blocked,
    )
    if decision.blocked:
        click.echo(render_block(SECURITY.label, decision), err=True)
    return decision
