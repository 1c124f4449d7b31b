"""Bounded removal of empty ancestor directories.

After a file is deleted or moved, its old directory chain may be left empty.
The walk climbs from a start directory towards a root boundary, removing
each directory that is empty and stopping at the first one that is not.
The boundary itself is never removed or crossed.
"""

import logging
import os

from fsguard.safety.models import CleanupResult, SkippedEntry
from fsguard.safety.paths import expand_path, is_same_path, is_strict_ancestor

logger = logging.getLogger(__name__)

OUTSIDE_ROOT_BOUNDARY = "outside_root_boundary"


def remove_empty_directory(path: str) -> tuple[bool, str]:
    """Remove a directory only if it is currently empty.

    The directory is listed twice, the second time immediately before
    rmdir. This narrows, but does not close, the window in which another
    process could add an entry.

    Args:
        path: Canonical directory path.

    Returns:
        Tuple of (removed, reason).
    """
    try:
        if os.path.islink(path) or not os.path.isdir(path):
            return False, "not_a_directory"

        entries = os.listdir(path)
        if entries:
            return False, f"not_empty ({len(entries)} items)"

        if os.listdir(path):
            return False, "not_empty_on_recheck"

        os.rmdir(path)
    except OSError as e:
        return False, e.strerror or str(e)

    return True, "empty_directory_removed"


def cleanup_empty_directories(start: str, boundary: str) -> CleanupResult:
    """Remove start and its empty ancestors up to, but excluding, boundary.

    Args:
        start: Directory to begin with.
        boundary: Strict ancestor of start that is never removed.

    Returns:
        CleanupResult listing removed directories (deepest first) and the
        directory the walk stopped at, if it stopped early.
    """
    current = expand_path(start)
    root = expand_path(boundary)
    removed: list[str] = []
    skipped: list[SkippedEntry] = []

    if not is_strict_ancestor(root, current):
        logger.warning("Cleanup start %s is not below boundary %s", current, root)
        return CleanupResult(skipped=(SkippedEntry(current, OUTSIDE_ROOT_BOUNDARY),))

    while not is_same_path(current, root):
        was_removed, reason = remove_empty_directory(current)
        if not was_removed:
            logger.debug("Cleanup stopped at %s: %s", current, reason)
            skipped.append(SkippedEntry(current, reason))
            break

        logger.info("Removed empty directory %s", current)
        removed.append(current)
        current = os.path.dirname(current)

    return CleanupResult(removed=tuple(removed), skipped=tuple(skipped))
