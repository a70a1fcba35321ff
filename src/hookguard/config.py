"""hookguard Configuration Module.

Provides process-level settings for the CLI and hook runners.
All settings support environment variable overrides with HOOKGUARD_ prefix.

Per-project scan behavior (mode, allow/ignore lists) lives in the project
config file instead; see hookguard.project_config.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default paths
HOOKGUARD_HOME = Path.home() / ".hookguard"
CLAUDE_HOME = Path.home() / ".claude"


class HookguardSettings(BaseSettings):
    """hookguard process configuration.

    All settings can be overridden via environment variables with HOOKGUARD_
    prefix. For example, HOOKGUARD_STDIN_TIMEOUT=5 waits up to five seconds
    for a hook payload.
    """

    model_config = SettingsConfigDict(
        env_prefix="HOOKGUARD_",
        env_nested_delimiter="__",
    )

    # Paths
    home: Path = Field(
        default=HOOKGUARD_HOME,
        description="Base directory for hookguard state (error log)",
    )
    claude_home: Path = Field(
        default=CLAUDE_HOME,
        description="Directory holding the global settings.json",
    )

    # Hook runner settings
    stdin_timeout: float = Field(
        default=2.0,
        description="Seconds to wait for a JSON payload on stdin",
    )

    # Logging
    log_level: str = Field(
        default="warning",
        description="Logging level (debug, info, warning, error)",
    )
    log_format: str = Field(
        default="console",
        description="Log output format (console or json)",
    )

    @property
    def hook_error_log(self) -> Path:
        """File that collects unexpected hook failures."""
        return self.home / "hook_errors.log"


# Module-level singleton
settings = HookguardSettings()
