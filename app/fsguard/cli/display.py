"""Shared Rich display functions for guard and organizer results.

Provides reusable table builders and summary printers used by the delete,
organize and dupes commands.
"""

import json

from rich.markup import escape
from rich.table import Table

from fsguard.safety.models import (
    CleanupResult,
    DuplicateGroup,
    GuardResult,
    OrganizerResult,
    Outcome,
    PolicyChecks,
    PreviewItem,
)
from fsguard.utils.formatting import (
    console,
    create_table,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)


def print_json(data: object) -> None:
    """Print data as JSON on stdout."""
    console.print_json(json.dumps(data))


def _mark(passed: bool | None) -> str:
    if passed is None:
        return "[muted]skipped[/]"
    return "[success]pass[/]" if passed else "[error]fail[/]"


def create_checks_table(checks: PolicyChecks) -> Table:
    """Create a table showing the three policy sub-checks."""
    table = create_table("Policy Checks")
    table.add_column("Check", width=16)
    table.add_column("Result", width=8, justify="center")
    table.add_row("allowed scope", _mark(checks.scope))
    table.add_row("protected path", _mark(checks.path))
    table.add_row("protected name", _mark(checks.name))
    return table


def create_preview_table(items: tuple[PreviewItem, ...] | list[PreviewItem]) -> Table:
    """Create a table listing the entries a deletion would remove."""
    table = create_table("Would Delete (preview)")
    table.add_column("Path", style="removed")
    table.add_column("Kind", width=10)
    table.add_column("Size", justify="right", width=10, style="info")
    for item in items:
        size = format_size(item.size) if item.size is not None else "-"
        table.add_row(escape(item.path), item.kind.value, size)
    return table


def print_cleanup(cleanup: CleanupResult | None) -> None:
    """Print which empty directories were removed and where the walk stopped."""
    if cleanup is None:
        return
    for path in cleanup.removed:
        console.print(f"[removed]-[/] removed empty directory {escape(path)}")
    for skipped in cleanup.skipped:
        console.print(f"[muted]kept {escape(skipped.path)} ({escape(skipped.reason)})[/]")


def print_outcome(outcome: Outcome, detail: str | None, reason: str | None) -> None:
    """Print the summary line for a result."""
    if outcome == Outcome.SUCCESS:
        print_success(detail or "Done.")
    elif outcome == Outcome.REJECTED:
        print_error(f"Rejected ({reason}): {detail}")
    else:
        print_error(detail or "Operation failed.")


def print_guard_result(result: GuardResult) -> None:
    """Display a deletion result with its checks, preview and cleanup."""
    console.print(create_checks_table(result.checks))
    if result.preview:
        console.print(create_preview_table(result.preview))
    print_cleanup(result.cleanup)
    print_outcome(result.outcome, result.detail, result.reason.value if result.reason else None)


def print_organizer_result(result: OrganizerResult) -> None:
    """Display moves, skipped files and cleanup of an organizer result."""
    if result.moved:
        title = "Planned Moves (preview)" if result.dry_run else "Moved Files"
        table = create_table(title)
        table.add_column("From", style="muted")
        table.add_column("To", style="moved")
        for moved in result.moved:
            table.add_row(escape(moved.source), escape(moved.destination))
        console.print(table)

    for skipped in result.skipped:
        print_warning(f"Skipped {skipped.path}: {skipped.reason}")

    print_cleanup(result.cleanup)
    print_outcome(result.outcome, result.detail, result.reason.value if result.reason else None)


def print_duplicates(groups: list[DuplicateGroup]) -> None:
    """Display duplicate groups and the space they waste."""
    if not groups:
        print_success("No duplicate files found.")
        return

    table = create_table("Duplicate Files")
    table.add_column("Digest", style="muted", width=12, no_wrap=True)
    table.add_column("Size", justify="right", width=10, style="info")
    table.add_column("Files")
    for group in groups:
        paths = "\n".join(escape(p) for p in group.paths)
        table.add_row(group.digest[:12], format_size(group.size), paths)
    console.print(table)

    wasted = sum(g.wasted_bytes for g in groups)
    print_info(f"{len(groups)} duplicate group(s), {format_size(wasted)} reclaimable")
