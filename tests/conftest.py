"""Pytest configuration and fixtures."""

import threading
from collections.abc import Generator
from pathlib import Path

import pytest

from hookguard.config import settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point hookguard and the global settings file at a temp directory.

    Tests must never touch the real ~/.claude/settings.json.
    """
    home = tmp_path / "home"
    monkeypatch.setattr(settings, "home", home / ".hookguard")
    monkeypatch.setattr(settings, "claude_home", home / ".claude")
    monkeypatch.setattr(settings, "stdin_timeout", 0.5)
    return home


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty project directory that is also the working directory."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project


def _is_tracked_thread(t: threading.Thread) -> bool:
    """Check if a thread should be tracked for leak detection.

    Daemon threads (the timed stdin reader) are expected to outlive a test.
    """
    if t.daemon:
        return False
    return t.name != "MainThread"


@pytest.fixture(autouse=True)
def thread_leak_tracker(
    request: pytest.FixtureRequest,
) -> Generator[None, None, None]:
    """Fail tests that leave non-daemon threads running.

    To skip this check for a specific test, use:
        @pytest.mark.no_resource_tracking
    """
    if request.node.get_closest_marker("no_resource_tracking"):
        yield
        return

    baseline = {t for t in threading.enumerate() if _is_tracked_thread(t)}

    yield

    leaked = {t for t in threading.enumerate() if _is_tracked_thread(t)} - baseline
    if leaked:
        pytest.fail(
            f"Thread leak detected - {len(leaked)} thread(s): {[t.name for t in leaked]}. "
            "Tests must join all threads before completion."
        )


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "no_resource_tracking: skip resource leak checking for this test",
    )
