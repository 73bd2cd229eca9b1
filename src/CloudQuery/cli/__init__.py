"""CLI package for CloudQuery.

Holds the click interface, the command runner and the command
implementations.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from CloudQuery.cli.runner import CommandRunner
from CloudQuery.cli.ui import cli


def main() -> None:
    """Run the CloudQuery CLI.

    Entry point referenced by the console script in pyproject.toml.
    """
    cli()
