"""Themed Rich consoles and message helpers.

Results and tables go to stdout; warnings and errors go to stderr so that
`--json` output stays machine-readable. Messages are printed literally:
any Rich markup inside them, such as brackets in a path, is escaped.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fsguard.core.theme import get_theme


def _make_console(stderr: bool = False) -> Console:
    stream = sys.stderr if stderr else sys.stdout
    # No color when the stream is not a terminal
    color_system = "truecolor" if stream.isatty() else None
    return Console(theme=get_theme(), stderr=stderr, color_system=color_system)


console = _make_console()
err_console = _make_console(stderr=True)


def create_table(title: str) -> Table:
    """Create a table styled with the theme's header and border colors."""
    return Table(title=title, show_header=True, header_style="bold_header", border_style="border")


def format_size(size_bytes: int | None) -> str:
    """Format a byte count as a human-readable string (1024-based units)."""
    if not size_bytes:
        return "0 B"
    if abs(size_bytes) < 1024:
        return f"{size_bytes} B"

    size = float(size_bytes)
    for unit in ("KB", "MB", "GB"):
        size /= 1024
        if abs(size) < 1024:
            return f"{size:.1f} {unit}"
    return f"{size / 1024:.1f} TB"


def print_info(message: str) -> None:
    console.print(f"[info]{escape(message)}[/]")


def print_success(message: str) -> None:
    console.print(f"[success]{escape(message)}[/]")


def print_warning(message: str) -> None:
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    err_console.print(f"[error]Error:[/] {escape(message)}")
