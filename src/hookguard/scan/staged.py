"""Scan files in the git staging area for secrets.

Only used by the secrets hook when the project opts in with
``scanGitCommit`` and the payload is a ``git commit`` command.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from pathlib import Path, PurePath
from types import ModuleType
from typing import Any

import structlog

from hookguard.scan.detector import detect_in_files
from hookguard.scan.models import Finding, PatternRule
from hookguard.scan.patterns import FILE_RULES

logger = structlog.get_logger(__name__)

EXCLUDED_DIRS = frozenset({
    "node_modules", ".git", "dist", "build", "out", "vendor",
    "__pycache__", ".next", ".nuxt", "coverage", ".tox", ".venv",
    "venv", ".mypy_cache", ".pytest_cache", "bower_components",
})

BINARY_EXTENSIONS = frozenset({
    ".png", ".jpg", ".jpeg", ".gif", ".ico", ".bmp", ".webp", ".svg",
    ".woff", ".woff2", ".ttf", ".eot", ".otf",
    ".pdf", ".zip", ".tar", ".gz", ".bz2", ".xz", ".7z", ".rar",
    ".mp3", ".mp4", ".wav", ".ogg", ".flac", ".avi", ".mov", ".mkv",
    ".exe", ".dll", ".so", ".dylib", ".bin", ".o", ".obj",
    ".pyc", ".pyo", ".class", ".jar", ".war",
    ".wasm", ".sqlite", ".db", ".lock",
})

BINARY_SNIFF_BYTES = 8192
MAX_TEXT_CHARS = 1_048_576

_GIT_COMMIT = re.compile(r"git\s+commit\b")


def is_excluded(file_path: str) -> bool:
    """Check whether a path sits under an excluded dir or has a binary extension."""
    path = PurePath(file_path)
    if any(part in EXCLUDED_DIRS for part in path.parts):
        return True
    return path.suffix.lower() in BINARY_EXTENSIONS


def is_binary(data: bytes) -> bool:
    """Check for a NUL byte in the first 8 KiB."""
    return b"\x00" in data[:BINARY_SNIFF_BYTES]


def _load_git() -> ModuleType | None:
    """Import GitPython on first use.

    GitPython refuses to import when no git executable is found, and hooks
    that never scan staged files must keep working without one.
    """
    try:
        import git
    except ImportError as e:
        logger.warning("staged.git_unavailable", error=str(e))
        return None
    return git


def staged_files(repo_root: Path) -> list[str]:
    """List added, copied and modified files in the staging area.

    Args:
        repo_root: Directory inside the repository

    Returns:
        Repository-relative paths; empty if git is unavailable or fails
    """
    git = _load_git()
    if git is None:
        return []
    try:
        repo = git.Repo(repo_root, search_parent_directories=True)
        output = repo.git.diff("--cached", "--name-only", "--diff-filter=ACM")
    except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
        logger.debug("staged.not_a_repo", path=str(repo_root), error=str(e))
        return []
    except (git.GitCommandError, git.GitCommandNotFound, OSError) as e:
        logger.warning("staged.git_failed", path=str(repo_root), error=str(e))
        return []
    return [line for line in output.splitlines() if line.strip()]


def _read_eligible(paths: Sequence[str], root: Path) -> Iterator[tuple[str, str]]:
    for rel_path in paths:
        if is_excluded(rel_path):
            continue
        try:
            data = (root / rel_path).read_bytes()
        except OSError:
            # Deleted or unreadable between staging and scanning
            continue
        if is_binary(data):
            continue
        text = data.decode("utf-8", errors="replace")
        if len(text) > MAX_TEXT_CHARS:
            continue
        yield rel_path, text


def scan_files(
    paths: Sequence[str],
    root: Path,
    rules: Sequence[PatternRule] = FILE_RULES,
) -> list[Finding]:
    """Scan the eligible files among paths.

    Args:
        paths: Paths relative to root
        root: Directory the paths are relative to
        rules: Registry to scan with

    Returns:
        Findings deduplicated by (rule id, file path)
    """
    return detect_in_files(_read_eligible(paths, root), rules)


def scan_staged_files(repo_root: Path) -> list[Finding]:
    """Scan every staged file in the repository containing repo_root."""
    git = _load_git()
    if git is None:
        return []
    try:
        top = Path(
            git.Repo(repo_root, search_parent_directories=True).working_tree_dir or repo_root
        )
    except (git.InvalidGitRepositoryError, git.NoSuchPathError):
        return []
    files = staged_files(top)
    if not files:
        return []
    logger.debug("staged.scanning", count=len(files))
    return scan_files(files, top)


def is_git_commit_payload(payload: Any) -> bool:
    """Check whether a hook payload runs ``git commit``.

    Looks at ``command`` and then ``tool_input.command``.
    """
    if not isinstance(payload, dict):
        return False
    cmd = payload.get("command")
    if cmd is None:
        tool_input = payload.get("tool_input")
        if isinstance(tool_input, dict):
            cmd = tool_input.get("command")
    if not isinstance(cmd, str):
        return False
    return bool(_GIT_COMMIT.search(cmd))
