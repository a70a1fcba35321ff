"""hookguard hook runners.

Each runner reads a JSON payload from stdin, scans it, reports to stderr and
returns the exit status the agent should see:

- security: risky shell idioms; block mode stops PreToolUse only
- secrets: secret-shaped tokens; block mode stops on HIGH findings only
"""

from hookguard.hooks.common import (
    log_hook_error,
    parse_payload,
    read_stdin,
)

__all__ = [
    "log_hook_error",
    "parse_payload",
    "read_stdin",
]
