"""hookguard package commands (security, secrets).

Both packages expose the same commands; only the scanner behind ``run``
differs.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from hookguard.config import settings
from hookguard.doctor import inspect
from hookguard.hooks import log_hook_error, parse_payload, read_stdin
from hookguard.hooks import secrets as secrets_hook
from hookguard.hooks import security as security_hook
from hookguard.install import SetupOptions, SetupResult
from hookguard.install.config_merge import Scope
from hookguard.install.packages import SECRETS, SECURITY, ManagedPackage
from hookguard.install.setup import run_remove, run_setup
from hookguard.project_config import CONFIG_FILENAME, ScanConfig, load_scan_config
from hookguard.scan.policy import EXIT_USAGE, Decision, Mode

Runner = Callable[[str, Any, ScanConfig, Mode | None], Decision]

SCOPES = [scope.value for scope in Scope]


def _echo_result(result: SetupResult) -> None:
    for message in result.messages:
        click.echo(f"  {message}")
    for error in result.errors:
        click.echo(click.style(f"  [ERROR] {error}", fg="red"), err=True)
    if result.status == "failed":
        sys.exit(EXIT_USAGE)


def _project_dir_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--project-dir",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Project directory (default: current directory)",
    )(func)


def make_package_group(package: ManagedPackage, runner: Runner) -> click.Group:
    """Build the command group for one package."""

    @click.group(name=package.name)
    def group() -> None:
        pass

    group.help = f"{package.label} hook commands."

    @group.command(
        "run",
        context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
    )
    @click.option("--event", "event_name", default=None, help="Hook event that fired")
    @click.option("--mode", default=None, help="warn or block (default: from config, else warn)")
    @click.option("--managed-by", default=None, hidden=True)
    def run(event_name: str | None, mode: str | None, managed_by: str | None) -> None:
        """Run as a hook handler (reads a JSON payload from stdin).

        Exit status 0 lets the tool call proceed, 2 blocks it, 1 is a usage
        or environment error.
        """
        if not event_name or event_name not in package.events:
            click.echo(
                f"Invalid or missing --event. Supported: {', '.join(package.events)}",
                err=True,
            )
            sys.exit(EXIT_USAGE)

        config = load_scan_config(Path.cwd(), package.name)
        payload = parse_payload(read_stdin(settings.stdin_timeout))
        try:
            decision = runner(event_name, payload, config, Mode.resolve(mode) if mode else None)
        except Exception as e:
            log_hook_error(f"{package.name}.{event_name}", e)
            click.echo(f"{package.label}: internal error: {e}", err=True)
            sys.exit(EXIT_USAGE)
        sys.exit(decision.exit_code)

    @group.command("list-events")
    def list_events() -> None:
        """List supported hook events."""
        for event_name in package.events:
            click.echo(event_name)

    @group.command("setup")
    @click.option("--scope", type=click.Choice(SCOPES), default=Scope.PROJECT.value, show_default=True)
    @_project_dir_option
    @click.option("--mode", type=click.Choice([m.value for m in Mode]), default=None)
    @click.option(
        "--event",
        "events",
        type=click.Choice(list(package.events)),
        multiple=True,
        help="Event to guard (repeatable; default: from config, else all)",
    )
    @click.option(
        "--scan-git-commit/--no-scan-git-commit",
        default=None,
        hidden=package is not SECRETS,
        help="Also scan staged files when the payload is a git commit",
    )
    @click.option("--dry-run", is_flag=True, help="Show what would be done without writing")
    def setup(
        scope: str,
        project_dir: Path | None,
        mode: str | None,
        events: tuple[str, ...],
        scan_git_commit: bool | None,
        dry_run: bool,
    ) -> None:
        """Install managed hooks into a settings file.

        Running setup again replaces the handlers it wrote before, so the
        settings file never accumulates duplicates.
        """
        project_dir = project_dir or Path.cwd()
        existing = load_scan_config(project_dir, package.name)
        enabled = list(events) if events else existing.enabled_events
        options = SetupOptions(
            scope=scope,
            project_dir=project_dir,
            mode=mode or existing.mode.value,
            enabled_events=[e for e in enabled if e in package.events],
            scan_git_commit=scan_git_commit if package is SECRETS else None,
            dry_run=dry_run,
        )
        click.echo(f"{package.label} setup ({scope}, mode={options.mode})")
        _echo_result(run_setup(package, options))

    @group.command("remove")
    @click.option("--scope", type=click.Choice(SCOPES), default=Scope.PROJECT.value, show_default=True)
    @_project_dir_option
    @click.option("--dry-run", is_flag=True, help="Show what would be done without writing")
    def remove(scope: str, project_dir: Path | None, dry_run: bool) -> None:
        """Remove this package's managed hooks from a settings file."""
        options = SetupOptions(scope=scope, project_dir=project_dir or Path.cwd(), dry_run=dry_run)
        click.echo(f"{package.label} remove ({scope})")
        _echo_result(run_remove(package, options))

    @group.command("doctor")
    @_project_dir_option
    def doctor(project_dir: Path | None) -> None:
        """Inspect config and installed managed hooks."""
        project_dir = project_dir or Path.cwd()
        report = inspect(package, project_dir)

        click.echo(click.style(f"{package.label} doctor", bold=True))
        click.echo(f"cwd: {project_dir}")
        click.echo("")
        click.echo(click.style("Project config", bold=True))
        found = "found" if report.config_exists else "not found"
        click.echo(f"- {CONFIG_FILENAME}: {found}")
        click.echo(f"- path: {report.config_path}")
        if report.config_error:
            click.echo(f"- parse: {click.style('error', fg='red')} {report.config_error}")
        elif report.effective is not None:
            effective = report.effective
            click.echo(f"- mode: {effective.mode.value}")
            click.echo(f"- enabledEvents: {', '.join(effective.enabled_events) or '(none)'}")
            if package is SECRETS:
                click.echo(f"- scanGitCommit: {str(effective.scan_git_commit).lower()}")
            click.echo(f"- allow.regex: {len(effective.allow.regex)}")
            click.echo(f"- ignore.regex: {len(effective.ignore.regex)}")
        click.echo("")

        click.echo(click.style("Settings", bold=True))
        for scope_report in report.scopes:
            label = click.style(scope_report.scope.value, bold=True)
            if scope_report.error:
                click.echo(f"- {label}: {scope_report.path} {click.style('ERROR', fg='red')} {scope_report.error}")
                continue
            state = "has managed hooks" if scope_report.has_managed else "no managed hooks"
            click.echo(f"- {label}: {scope_report.path} {state}")
            for event_name, handlers in scope_report.handlers.items():
                if not handlers:
                    continue
                modes = ", ".join(h.mode or "unknown" for h in handlers)
                dup = " " + click.style("DUPLICATE?", fg="yellow") if len(handlers) > 1 else ""
                click.echo(f"  - {event_name}: {len(handlers)} handler(s) mode=[{modes}]{dup}")
            if scope_report.duplicate_events:
                click.echo(
                    f"    Tip: re-run setup or remove to clean duplicates; "
                    f"{package.label} only manages its own handlers."
                )

    return group


security = make_package_group(SECURITY, security_hook.run_hook)
secrets = make_package_group(SECRETS, secrets_hook.run_hook)
