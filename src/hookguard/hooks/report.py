"""Human-readable hook reports on stderr."""

from __future__ import annotations

import click

from hookguard.project_config import CONFIG_FILENAME
from hookguard.scan.models import Assessment, Severity
from hookguard.scan.policy import Decision, Mode


def _dim(text: str) -> str:
    return click.style(text, dim=True)


def render_report(label: str, assessment: Assessment, mode: Mode, noun: str, tip: str) -> str:
    """Format findings (or the suppression note) for one hook run.

    Args:
        label: Package label shown in the header
        assessment: Scan result
        mode: Effective runner mode
        noun: What findings are called ("risk" or "secret")
        tip: Closing hint printed after the findings

    Returns:
        Report text without a trailing newline
    """
    header = (
        f"{click.style(label, fg='yellow', bold=True)} {_dim('·')} "
        f"{click.style(assessment.event_name, bold=True)} {_dim('·')} mode={mode.value}"
    )
    lines = [header]

    if assessment.suppressed is not None:
        lines.append(
            _dim(
                f"{noun.capitalize()}s suppressed by {assessment.suppressed} "
                f"pattern in {CONFIG_FILENAME}"
            )
        )
        return "\n".join(lines)

    if not assessment.findings:
        lines.append(click.style(f"No obvious {noun}s detected by heuristics.", fg="green"))
        return "\n".join(lines)

    lines.append(
        click.style(
            f"Detected {len(assessment.findings)} potential {noun}(s):",
            fg="yellow",
            bold=True,
        )
    )
    for finding in assessment.findings:
        color = "red" if finding.severity is Severity.HIGH else "yellow"
        severity = click.style(finding.severity.value, fg=color)
        lines.append(
            f"- {click.style(finding.title, bold=True)} {_dim(f'({finding.id})')} "
            f"{_dim('severity=')}{severity}"
        )
        lines.append(f"  {_dim(finding.detail)}")
    lines.append("")
    lines.append(_dim(tip))
    return "\n".join(lines)


def render_block(label: str, decision: Decision) -> str:
    """Format the closing line of a blocked run."""
    reason = f" ({decision.reason})" if decision.reason else ""
    return click.style(f"Blocked by {label}{reason}.", fg="red", bold=True)
