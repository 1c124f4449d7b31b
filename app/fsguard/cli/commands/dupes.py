"""Duplicate file detection command.

This module provides the `fsguard dupes` command, a read-only scan that
groups files by content digest.
"""

from typing import Annotated

import typer

from fsguard.cli.display import print_duplicates, print_json
from fsguard.safety.hasher import ContentHasher, ScanError
from fsguard.utils.formatting import print_error

app = typer.Typer(
    name="dupes",
    help="Find duplicate files by content.",
    invoke_without_command=True,
    context_settings={"allow_interspersed_args": True},
)


@app.callback(invoke_without_command=True)
def dupes(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Directory to scan.")],
    no_recursive: Annotated[
        bool,
        typer.Option("--no-recursive", help="Only scan the top-level directory."),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Find files with identical content.

    Unreadable files are skipped; the scan never stops for one bad entry.

    Examples:
        fsguard dupes ~/projects
        fsguard dupes ~/Downloads --no-recursive --json
    """
    if ctx.invoked_subcommand is not None:
        return

    try:
        groups = ContentHasher().find_duplicates(path, recursive=not no_recursive)
    except ScanError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if json_output:
        print_json([g.to_dict() for g in groups])
        return

    print_duplicates(groups)
