"""hookguard - security and secret-scanning hooks for agent tool events."""

__version__ = "0.3.0"
