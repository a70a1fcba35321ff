"""Allow ``python -m hookguard``."""

from hookguard.cli.main import cli

if __name__ == "__main__":
    cli()
