"""fsguard - guarded deletion, moves and cleanup for local files."""

__version__ = "0.1.0"
