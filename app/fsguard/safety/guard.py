"""Guarded deletion of files and directories.

DeletionGuard is the single entry point for destructive requests. Every
request is checked against the PathPolicy before the filesystem is touched.
Recursive directory deletion additionally needs an explicit confirmation
flag, separate from the policy verdict.
"""

import logging
import os
import shutil

from fsguard.safety.cleanup import cleanup_empty_directories
from fsguard.safety.models import (
    CleanupResult,
    EntryKind,
    GuardResult,
    Outcome,
    PolicyChecks,
    PreviewItem,
    RejectionReason,
    SkippedEntry,
)
from fsguard.safety.paths import expand_path
from fsguard.safety.policy import PathPolicy, get_policy

logger = logging.getLogger(__name__)


def preview_deletion(path: str, recursive: bool = False) -> list[PreviewItem]:
    """List the entries a deletion of path would remove, without removing anything.

    For a recursive directory preview every descendant is listed depth-first,
    children before their directory, and the directory itself comes last.

    Args:
        path: File or directory to preview.
        recursive: Include all descendants of a directory.

    Returns:
        Preview items. Empty if the path does not exist or cannot be read.
    """
    target = expand_path(path)
    try:
        if os.path.islink(target) or os.path.isfile(target):
            return [PreviewItem(target, EntryKind.FILE, os.lstat(target).st_size)]
        if not os.path.isdir(target):
            return []
    except OSError as e:
        logger.warning("Cannot preview %s: %s", target, e)
        return []

    items: list[PreviewItem] = []
    if recursive:
        _collect_descendants(target, items)
    items.append(PreviewItem(target, EntryKind.DIRECTORY))
    return items


def _collect_descendants(directory: str, items: list[PreviewItem]) -> None:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.warning("Skipping unreadable directory %s: %s", directory, e)
        return

    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                _collect_descendants(entry.path, items)
                items.append(PreviewItem(entry.path, EntryKind.DIRECTORY))
            else:
                size = entry.stat(follow_symlinks=False).st_size
                items.append(PreviewItem(entry.path, EntryKind.FILE, size))
        except OSError as e:
            logger.warning("Skipping unreadable entry %s: %s", entry.path, e)


def guarded_cleanup(policy: PathPolicy, start: str, boundary: str) -> CleanupResult:
    """Run the empty-directory walk only if policy would allow deleting start.

    Args:
        policy: Policy the start directory must pass.
        start: Directory vacated by a delete or move.
        boundary: Strict ancestor of start where the walk stops.

    Returns:
        The walk result, or a single skip naming the rejection reason.
    """
    verdict = policy.validate_deletion(start)
    if not verdict.safe:
        return CleanupResult(skipped=(SkippedEntry(expand_path(start), verdict.reason_code),))
    return cleanup_empty_directories(start, boundary)


class DeletionGuard:
    """Validates and performs file and directory deletions.

    Args:
        policy: Policy to evaluate requests against. Defaults to the cached
            process-wide policy.
    """

    def __init__(self, policy: PathPolicy | None = None) -> None:
        self._policy = policy or get_policy()

    def delete_file(
        self,
        path: str,
        *,
        preview: bool = False,
        cleanup_empty: bool = False,
    ) -> GuardResult:
        """Delete a single file.

        Args:
            path: File to delete.
            preview: Report what would be deleted without deleting.
            cleanup_empty: Afterwards remove the file's parent directory if it
                became empty. The walk never climbs above the parent's parent.

        Returns:
            GuardResult describing the outcome.
        """
        target = expand_path(path)
        checks = self._policy.checks(target)

        verdict = self._policy.validate_deletion(target)
        if not verdict.safe:
            return GuardResult(
                path=target,
                outcome=Outcome.REJECTED,
                checks=checks,
                reason=verdict.reason,
                detail=verdict.detail,
            )

        if not os.path.lexists(target):
            return self._failed(target, checks, f"Path does not exist: {target}")
        if os.path.isdir(target) and not os.path.islink(target):
            return self._failed(
                target, checks, f"Path is a directory, not a file: {target}. Use rmdir instead."
            )

        if preview:
            logger.info("Preview: would delete %s", target)
            return GuardResult(
                path=target,
                outcome=Outcome.SUCCESS,
                checks=checks,
                detail="Would delete 1 file",
                preview=tuple(preview_deletion(target)),
                dry_run=True,
            )

        try:
            os.unlink(target)
        except OSError as e:
            return self._failed(target, checks, f"Failed to delete {target}: {e}")
        logger.info("Deleted file %s", target)

        cleanup = None
        if cleanup_empty:
            parent = os.path.dirname(target)
            cleanup = guarded_cleanup(self._policy, parent, os.path.dirname(parent))

        return GuardResult(
            path=target,
            outcome=Outcome.SUCCESS,
            checks=checks,
            detail=f"Deleted {target}",
            cleanup=cleanup,
        )

    def delete_directory(
        self,
        path: str,
        *,
        recursive: bool = False,
        confirm_recursive: bool = False,
        preview: bool = False,
    ) -> GuardResult:
        """Delete a directory.

        Non-recursive deletion only removes an empty directory. Recursive
        deletion removes the whole subtree and requires confirm_recursive in
        addition to passing the policy.

        Args:
            path: Directory to delete.
            recursive: Delete the directory and all of its contents.
            confirm_recursive: Explicit acknowledgment of a recursive delete.
            preview: Report what would be deleted without deleting. Previews
                do not need confirm_recursive.

        Returns:
            GuardResult describing the outcome.
        """
        target = expand_path(path)
        checks = self._policy.checks(target)

        verdict = self._policy.validate_deletion(target)
        if not verdict.safe:
            return GuardResult(
                path=target,
                outcome=Outcome.REJECTED,
                checks=checks,
                reason=verdict.reason,
                detail=verdict.detail,
            )

        if recursive and not confirm_recursive and not preview:
            return GuardResult(
                path=target,
                outcome=Outcome.REJECTED,
                checks=checks,
                reason=RejectionReason.RECURSIVE_REQUIRES_CONFIRMATION,
                detail=(
                    "Recursive deletion requires confirm_recursive=True. "
                    "Preview first to see what would be deleted."
                ),
            )

        if not os.path.lexists(target):
            return self._failed(target, checks, f"Path does not exist: {target}")
        if os.path.islink(target) or not os.path.isdir(target):
            return self._failed(target, checks, f"Path is not a directory: {target}")

        if preview:
            items = tuple(preview_deletion(target, recursive=recursive))
            logger.info("Preview: would delete %d entries under %s", len(items), target)
            return GuardResult(
                path=target,
                outcome=Outcome.SUCCESS,
                checks=checks,
                detail=f"Would delete {len(items)} item(s)",
                preview=items,
                dry_run=True,
            )

        try:
            if recursive:
                shutil.rmtree(target)
            else:
                entries = os.listdir(target)
                if entries:
                    return GuardResult(
                        path=target,
                        outcome=Outcome.REJECTED,
                        checks=checks,
                        reason=RejectionReason.NOT_EMPTY,
                        detail=(
                            f'Directory "{target}" is not empty ({len(entries)} items). '
                            "Use recursive=True with confirm_recursive=True to delete "
                            "it with its contents."
                        ),
                    )
                os.rmdir(target)
        except OSError as e:
            return self._failed(target, checks, f"Failed to delete {target}: {e}")

        logger.info("Deleted directory %s (recursive=%s)", target, recursive)
        return GuardResult(
            path=target,
            outcome=Outcome.SUCCESS,
            checks=checks,
            detail=f"Deleted {target}",
        )

    @staticmethod
    def _failed(path: str, checks: PolicyChecks, detail: str) -> GuardResult:
        logger.warning(detail)
        return GuardResult(path=path, outcome=Outcome.FAILED, checks=checks, detail=detail)
