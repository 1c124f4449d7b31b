"""Guarded deletion commands.

Provides `fsguard delete file` and `fsguard delete dir`, both checked
against the path policy before anything is removed.
"""

from typing import Annotated

import typer

from fsguard.cli.display import print_guard_result, print_json
from fsguard.safety.guard import DeletionGuard
from fsguard.safety.models import GuardResult
from fsguard.safety.policy import require_policy

app = typer.Typer(
    help="Delete files and directories with protection checks.",
    no_args_is_help=True,
)


def _report(result: GuardResult, json_output: bool) -> None:
    if json_output:
        print_json(result.to_dict())
    else:
        print_guard_result(result)

    if not result.success:
        raise typer.Exit(code=1)


@app.command("file")
def delete_file(
    path: Annotated[str, typer.Argument(help="File to delete.")],
    preview: Annotated[
        bool,
        typer.Option("--preview", "-p", help="Show what would be deleted."),
    ] = False,
    cleanup_empty: Annotated[
        bool,
        typer.Option("--cleanup-empty", help="Remove the parent directory if left empty."),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Delete a single file inside the allowed paths."""
    guard = DeletionGuard(require_policy())
    result = guard.delete_file(path, preview=preview, cleanup_empty=cleanup_empty)
    _report(result, json_output)


@app.command("dir")
def delete_directory(
    path: Annotated[str, typer.Argument(help="Directory to delete.")],
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Delete the directory and its contents."),
    ] = False,
    confirm_recursive: Annotated[
        bool,
        typer.Option(
            "--confirm-recursive",
            help="Acknowledge that a recursive delete removes everything below PATH.",
        ),
    ] = False,
    preview: Annotated[
        bool,
        typer.Option("--preview", "-p", help="Show what would be deleted."),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Delete a directory inside the allowed paths.

    Without --recursive only empty directories are removed. A recursive
    delete also needs --confirm-recursive.

    Examples:
        fsguard delete dir ~/projects/old-build
        fsguard delete dir ~/projects/old-build -r --preview
        fsguard delete dir ~/projects/old-build -r --confirm-recursive
    """
    guard = DeletionGuard(require_policy())
    result = guard.delete_directory(
        path,
        recursive=recursive,
        confirm_recursive=confirm_recursive,
        preview=preview,
    )
    _report(result, json_output)
