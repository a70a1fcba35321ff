"""Shared utilities for hookguard hooks.

Hooks communicate via stdin/stderr and the exit status:
- Input: JSON object describing the tool call (any shape)
- Output: warnings on stderr; exit 2 blocks the tool call
"""

from __future__ import annotations

import json
import sys
import threading
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any

from hookguard.config import settings

# Maximum size for hook error log before rotation (1 MB)
_HOOK_LOG_MAX_BYTES = 1_048_576


def get_hook_error_log_path() -> Path:
    """Get path to hook error log file.

    Returns:
        Path to hook_errors.log in the hookguard home directory
    """
    return settings.hook_error_log


def log_hook_error(hook_name: str, exc: BaseException) -> None:
    """Log a hook error to the hook error log file.

    Writes timestamp, hook name, exception type, message, and traceback.
    Rotates the file once it exceeds 1 MB (keeping one ``.1`` backup).

    This function never raises exceptions -- it silently ignores any I/O
    errors during logging itself.

    Args:
        hook_name: Name of the hook that encountered the error
        exc: The exception that was caught
    """
    try:
        log_path = get_hook_error_log_path()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        if log_path.exists():
            try:
                file_size = log_path.stat().st_size
            except OSError:
                file_size = 0
            if file_size >= _HOOK_LOG_MAX_BYTES:
                try:
                    log_path.rename(log_path.with_suffix(".log.1"))
                except OSError:
                    pass

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")  # noqa: UP017
        tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
        entry = (
            f"[{timestamp}] hook={hook_name} "
            f"exception={type(exc).__name__} message={exc}\n"
            f"{''.join(tb).rstrip()}\n\n"
        )

        with open(log_path, "a", encoding="utf-8") as f:
            f.write(entry)
    except Exception:
        pass  # Never let logging itself break a hook


def read_stdin(timeout: float, stream: IO[str] | None = None) -> str:
    """Read all of stdin, giving up after timeout seconds.

    Hooks can be launched with no payload at all (an interactive terminal, or
    an event that supplies no stdin), so the read must not block forever.

    Args:
        timeout: Seconds to wait for the stream to close
        stream: Stream to read (defaults to sys.stdin)

    Returns:
        Stripped input, or empty string on TTY, timeout or read error
    """
    stream = stream if stream is not None else sys.stdin
    if stream is None:
        return ""
    try:
        if stream.isatty():
            return ""
    except (AttributeError, ValueError):
        return ""

    chunks: list[str] = []

    def _reader() -> None:
        # Undecodable bytes are replaced; the rest of the payload is still scanned
        buffer = getattr(stream, "buffer", None)
        try:
            if buffer is not None:
                chunks.append(buffer.read().decode("utf-8", errors="replace"))
            else:
                chunks.append(stream.read())
        except (OSError, ValueError):
            pass

    worker = threading.Thread(target=_reader, name="hookguard-stdin", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive() or not chunks:
        return ""
    return chunks[0].strip()


def parse_payload(raw: str) -> Any:
    """Parse a hook payload.

    Returns:
        {} for blank input, the decoded JSON value, or {"raw": raw} when the
        input is not JSON (so the text is still scanned)
    """
    if not raw.strip():
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return {"raw": raw}
    return {"raw": raw} if value is None else value
