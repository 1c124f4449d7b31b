"""Move, rename and organize commands.

Each command validates its source and destination against the path policy
before moving anything.
"""

from typing import Annotated

import typer

from fsguard.cli.display import print_json, print_organizer_result
from fsguard.safety.models import OrganizerResult
from fsguard.safety.organizer import FileOrganizer, OrganizeCriteria
from fsguard.safety.policy import require_policy

app = typer.Typer(
    help="Move, rename and organize files within the allowed paths.",
    no_args_is_help=True,
)


def _report(result: OrganizerResult, json_output: bool) -> None:
    if json_output:
        print_json(result.to_dict())
    else:
        print_organizer_result(result)

    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def move(
    source: Annotated[str, typer.Argument(help="File to move.")],
    destination: Annotated[str, typer.Argument(help="Destination file path.")],
    cleanup_empty: Annotated[
        bool,
        typer.Option("--cleanup-empty", help="Remove the source directory if left empty."),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Move a file, creating destination directories as needed."""
    organizer = FileOrganizer(require_policy())
    result = organizer.move_file(source, destination, cleanup_empty=cleanup_empty)
    _report(result, json_output)


@app.command()
def rename(
    directory: Annotated[str, typer.Argument(help="Directory containing the files.")],
    pattern: Annotated[str, typer.Argument(help="Regular expression to search for.")],
    replacement: Annotated[str, typer.Argument(help="Replacement text.")],
    apply: Annotated[
        bool,
        typer.Option("--apply", help="Apply the renames (default is preview)."),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Batch rename files in a directory using a regex."""
    organizer = FileOrganizer(require_policy())
    result = organizer.rename_files(directory, pattern, replacement, preview=not apply)
    _report(result, json_output)


@app.command("by-type")
def by_type(
    source: Annotated[str, typer.Argument(help="Directory whose files are organized.")],
    destination: Annotated[str, typer.Argument(help="Directory receiving the buckets.")],
    criteria: Annotated[
        OrganizeCriteria,
        typer.Option("--by", "-b", help="Bucketing criteria.", case_sensitive=False),
    ] = OrganizeCriteria.EXTENSION,
    no_cleanup: Annotated[
        bool,
        typer.Option("--no-cleanup", help="Keep the source directory even if left empty."),
    ] = False,
    preview: Annotated[
        bool,
        typer.Option("--preview", "-p", help="Show planned moves without moving."),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Sort files into subdirectories by extension, date or size."""
    organizer = FileOrganizer(require_policy())
    result = organizer.organize_by_type(
        source,
        destination,
        criteria,
        cleanup_empty=not no_cleanup,
        preview=preview,
    )
    _report(result, json_output)
