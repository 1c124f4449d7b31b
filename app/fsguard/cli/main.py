"""fsguard command line.

Registers the command groups and configures logging from the global flags.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from fsguard import __version__
from fsguard.cli.commands import check, config, delete, dupes, organize
from fsguard.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="fsguard",
    help="Guarded deletion, moves and cleanup for local files.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"fsguard version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, quiet: bool) -> None:
    """Route log records through Rich on stderr."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """fsguard - guarded deletion, moves and cleanup for local files.

    Every destructive request is checked against an allow-list and a set of
    protected paths and names before anything is touched.
    """
    _configure_logging(verbose, quiet)


# Register commands
app.add_typer(check.app, name="check")
app.add_typer(delete.app, name="delete")
app.add_typer(organize.app, name="organize")
app.add_typer(dupes.app, name="dupes")
app.add_typer(config.app, name="config")

