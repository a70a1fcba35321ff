"""hookguard command-line interface."""
