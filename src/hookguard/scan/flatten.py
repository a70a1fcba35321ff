"""Flatten a hook payload into one scannable text blob."""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

# Top-level fields most likely to carry shell commands or tool arguments.
PRIORITY_FIELDS: tuple[str, ...] = (
    "command",
    "cmd",
    "shell",
    "tool",
    "tool_name",
    "toolName",
    "input",
    "arguments",
    "args",
    "reason",
)


def iter_strings(value: Any) -> Iterator[str]:
    """Yield every string leaf of a JSON value in traversal order.

    Empty strings, numbers, booleans and None yield nothing.
    """
    if isinstance(value, str):
        if value:
            yield value
    elif isinstance(value, dict):
        for item in value.values():
            yield from iter_strings(item)
    elif isinstance(value, list | tuple):
        for item in value:
            yield from iter_strings(item)


def _serialize(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def flatten(payload: Any) -> str:
    """Build the text blob a scan runs against.

    Priority fields present at the top level come first (raw if a string,
    JSON-encoded otherwise), followed by every string leaf of the payload.
    The generic walk repeats priority strings; matching is per-rule boolean,
    so duplicates are harmless.

    Args:
        payload: Parsed JSON payload (any JSON value)

    Returns:
        Newline-joined text
    """
    pieces: list[str] = []
    if isinstance(payload, dict):
        for key in PRIORITY_FIELDS:
            if key in payload:
                pieces.append(_serialize(payload[key]))
    pieces.extend(iter_strings(payload))
    return "\n".join(pieces)
