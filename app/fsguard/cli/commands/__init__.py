"""CLI commands for fsguard.

This package contains all subcommand implementations.
"""

from fsguard.cli.commands import check, config, delete, dupes, organize

__all__ = ["check", "config", "delete", "dupes", "organize"]
