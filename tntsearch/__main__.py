"""Entry point for ``python -m tntsearch``."""

from tntsearch.cli import cli

if __name__ == "__main__":
    cli()
