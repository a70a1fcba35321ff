"""Secrets hook: warn about or block secret-shaped tokens in tool input.

Input (stdin): any JSON payload; {"command": "git commit ..."} also scans the
staging area when the project enables ``scanGitCommit``
Output (stderr): findings report; exit 2 only in block mode on HIGH findings
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
import structlog

from hookguard.hooks.report import render_block, render_report
from hookguard.install.packages import SECRETS
from hookguard.project_config import ScanConfig
from hookguard.scan.assess import assess
from hookguard.scan.models import Assessment, Finding
from hookguard.scan.patterns import PAYLOAD_RULES
from hookguard.scan.policy import Decision, Mode, decide_secrets
from hookguard.scan.staged import is_git_commit_payload, scan_staged_files

logger = structlog.get_logger(__name__)

TIP = (
    "Tip: Move secrets to env vars / secret manager; never paste private keys "
    "or long-lived tokens into tool inputs."
)


def assess_secrets(
    event_name: str,
    payload: Any,
    config: ScanConfig,
    project_dir: Path | None = None,
) -> Assessment:
    """Scan a payload, and the staged files for a git commit when enabled.

    Args:
        event_name: Hook event that fired
        payload: Parsed stdin payload
        config: Effective project config
        project_dir: Repository to scan staged files in (defaults to cwd)

    Returns:
        Assessment after allow/ignore suppression
    """
    staged: list[Finding] = []
    if config.scan_git_commit and is_git_commit_payload(payload):
        staged = scan_staged_files(project_dir or Path.cwd())
    return assess(
        event_name,
        payload,
        PAYLOAD_RULES,
        allow=config.allow.compile(),
        ignore=config.ignore.compile(),
        extra_findings=staged,
    )


def run_hook(
    event_name: str,
    payload: Any,
    config: ScanConfig,
    mode: Mode | None = None,
    project_dir: Path | None = None,
) -> Decision:
    """Run the secrets hook for one payload.

    Args:
        event_name: Hook event that fired
        payload: Parsed stdin payload
        config: Effective project config
        mode: Mode override (defaults to the config mode)
        project_dir: Repository for the staged-file scan

    Returns:
        Decision carrying the exit code
    """
    SECRETS.validate_event(event_name)
    effective_mode = mode or config.mode
    assessment = assess_secrets(event_name, payload, config, project_dir)

    # allow-suppressed runs stay silent; ignore leaves a dim note
    if assessment.findings or assessment.suppressed == "ignore":
        click.echo(
            render_report(SECRETS.label, assessment, effective_mode, "secret", TIP),
            err=True,
        )

    decision = decide_secrets(effective_mode, assessment.findings)
    logger.debug(
        "hook.decided",
        package=SECRETS.name,
        hook_event=event_name,
        findings=len(assessment.findings),
        suppressed=assessment.suppressed,
        blocked=decision.blocked,
    )
    if decision.blocked:
        click.echo(render_block(SECRETS.label, decision), err=True)
    return decision
