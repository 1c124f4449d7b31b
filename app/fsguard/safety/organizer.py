"""Policy-gated moves, batch renames and organize-by-type.

Each operation validates its source with the same checks as a deletion
(the file leaves its location) and requires destinations to be inside the
allowed scope. Existing destination files are never overwritten.
"""

import logging
import os
import re
import shutil
from datetime import datetime
from enum import Enum

from fsguard.safety.cleanup import cleanup_empty_directories
from fsguard.safety.guard import guarded_cleanup
from fsguard.safety.models import MovedFile, OrganizerResult, Outcome, SkippedEntry
from fsguard.safety.paths import expand_path
from fsguard.safety.policy import PathPolicy, get_policy

logger = logging.getLogger(__name__)

KIB = 1024
MIB = 1024 * KIB


class OrganizeCriteria(str, Enum):
    """How organize_by_type buckets files into subdirectories."""

    EXTENSION = "extension"
    DATE = "date"
    SIZE = "size"


def bucket_for(name: str, stat: os.stat_result, criteria: OrganizeCriteria) -> str:
    """Return the subdirectory name a file belongs in.

    Args:
        name: File basename.
        stat: Result of os.stat for the file.
        criteria: Bucketing criteria.

    Returns:
        Bucket directory name.
    """
    if criteria == OrganizeCriteria.EXTENSION:
        ext = os.path.splitext(name)[1].lower()
        return ext[1:].upper() if ext else "NO_EXTENSION"

    if criteria == OrganizeCriteria.DATE:
        return datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m")

    size = stat.st_size
    if size < KIB:
        return "tiny"
    if size < MIB:
        return "small"
    if size < 100 * MIB:
        return "medium"
    return "large"


class FileOrganizer:
    """Moves and renames files under the protection of a PathPolicy.

    Args:
        policy: Policy to evaluate requests against. Defaults to the cached
            process-wide policy.
    """

    def __init__(self, policy: PathPolicy | None = None) -> None:
        self._policy = policy or get_policy()

    def move_file(
        self,
        source: str,
        destination: str,
        *,
        cleanup_empty: bool = False,
    ) -> OrganizerResult:
        """Move one file, creating the destination's parent directories.

        Args:
            source: File to move.
            destination: Full destination path (not a directory to move into).
            cleanup_empty: Afterwards remove the source directory if it became
                empty, never climbing above its parent.

        Returns:
            OrganizerResult describing the outcome.
        """
        src = expand_path(source)
        dst = expand_path(destination)

        verdict = self._policy.validate_deletion(src)
        if not verdict.safe:
            return OrganizerResult(src, Outcome.REJECTED, verdict.reason, verdict.detail)

        verdict = self._policy.is_within_allowed_scope(dst)
        if not verdict.safe:
            return OrganizerResult(src, Outcome.REJECTED, verdict.reason, verdict.detail)

        if not os.path.lexists(src):
            return self._failed(src, f"Source does not exist: {src}")
        if os.path.isdir(src) and not os.path.islink(src):
            return self._failed(src, f"Source is a directory, not a file: {src}")
        if os.path.lexists(dst):
            return self._failed(src, f"Destination already exists: {dst}")

        source_dir = os.path.dirname(src)
        try:
            os.makedirs(os.path.dirname(dst), exist_ok=True)
            shutil.move(src, dst)
        except OSError as e:
            return self._failed(src, f"Failed to move {src} to {dst}: {e}")
        logger.info("Moved %s -> %s", src, dst)

        cleanup = None
        if cleanup_empty:
            cleanup = guarded_cleanup(self._policy, source_dir, os.path.dirname(source_dir))

        return OrganizerResult(
            path=src,
            outcome=Outcome.SUCCESS,
            detail=f"Moved {src} to {dst}",
            moved=(MovedFile(src, dst),),
            cleanup=cleanup,
        )

    def rename_files(
        self,
        directory: str,
        pattern: str,
        replacement: str,
        *,
        preview: bool = True,
    ) -> OrganizerResult:
        """Rename files directly inside a directory using a regex substitution.

        Only the first match in each name is replaced. Files whose current
        name is protected, or whose new name is taken, are skipped.

        Args:
            directory: Directory containing the files.
            pattern: Regular expression searched in each file name.
            replacement: Replacement string (re.sub syntax).
            preview: Report planned renames without applying them.

        Returns:
            OrganizerResult whose moved entries are the (planned) renames.
        """
        target = expand_path(directory)

        verdict = self._policy.is_within_allowed_scope(target)
        if not verdict.safe:
            return OrganizerResult(target, Outcome.REJECTED, verdict.reason, verdict.detail)

        if not os.path.isdir(target):
            return self._failed(target, f"Not a directory: {target}")

        try:
            regex = re.compile(pattern)
        except re.error as e:
            return self._failed(target, f"Invalid rename pattern {pattern!r}: {e}")
        try:
            # Parses the template and its group references without a match
            regex.sub(replacement, "", count=1)
        except (re.error, IndexError) as e:
            return self._failed(target, f"Invalid replacement {replacement!r}: {e}")

        try:
            names = sorted(os.listdir(target))
        except OSError as e:
            return self._failed(target, f"Cannot list {target}: {e}")

        moved: list[MovedFile] = []
        skipped: list[SkippedEntry] = []
        claimed: set[str] = set()

        for name in names:
            src = os.path.join(target, name)
            if not os.path.isfile(src) or os.path.islink(src) or not regex.search(name):
                continue

            new_name = regex.sub(replacement, name, count=1)
            if new_name == name:
                continue
            if not new_name or os.sep in new_name or (os.altsep and os.altsep in new_name):
                skipped.append(SkippedEntry(src, f"invalid_name ({new_name!r})"))
                continue

            verdict = self._policy.validate_deletion(src)
            if not verdict.safe:
                skipped.append(SkippedEntry(src, verdict.reason_code))
                continue

            dst = os.path.join(target, new_name)
            if os.path.lexists(dst) or dst in claimed:
                skipped.append(SkippedEntry(src, "destination_exists"))
                continue

            if not preview:
                try:
                    os.rename(src, dst)
                except OSError as e:
                    skipped.append(SkippedEntry(src, str(e)))
                    continue
                logger.info("Renamed %s -> %s", src, dst)

            claimed.add(dst)
            moved.append(MovedFile(src, dst))

        verb = "Would rename" if preview else "Renamed"
        return OrganizerResult(
            path=target,
            outcome=Outcome.SUCCESS,
            detail=f"{verb} {len(moved)} file(s)",
            moved=tuple(moved),
            skipped=tuple(skipped),
            dry_run=preview,
        )

    def organize_by_type(
        self,
        source: str,
        destination: str,
        criteria: OrganizeCriteria = OrganizeCriteria.EXTENSION,
        *,
        cleanup_empty: bool = True,
        preview: bool = False,
    ) -> OrganizerResult:
        """Sort the files directly inside source into destination/<bucket>/.

        Args:
            source: Directory whose files are organized.
            destination: Directory receiving the bucket subdirectories.
            criteria: Bucketing criteria.
            cleanup_empty: Afterwards remove source if it became empty. The
                walk never climbs above the parent of source.
            preview: Report planned moves without applying them.

        Returns:
            OrganizerResult describing the moves and any cleanup.
        """
        src_dir = expand_path(source)
        dst_dir = expand_path(destination)

        verdict = self._policy.validate_deletion(src_dir)
        if not verdict.safe:
            return OrganizerResult(src_dir, Outcome.REJECTED, verdict.reason, verdict.detail)

        verdict = self._policy.is_within_allowed_scope(dst_dir)
        if not verdict.safe:
            return OrganizerResult(src_dir, Outcome.REJECTED, verdict.reason, verdict.detail)

        if not os.path.isdir(src_dir):
            return self._failed(src_dir, f"Not a directory: {src_dir}")

        try:
            names = sorted(os.listdir(src_dir))
        except OSError as e:
            return self._failed(src_dir, f"Cannot list {src_dir}: {e}")

        moved: list[MovedFile] = []
        skipped: list[SkippedEntry] = []

        for name in names:
            src = os.path.join(src_dir, name)
            try:
                if os.path.islink(src) or not os.path.isfile(src):
                    continue
                stat = os.stat(src)
            except OSError as e:
                skipped.append(SkippedEntry(src, str(e)))
                continue

            verdict = self._policy.is_name_protected(name)
            if not verdict.safe:
                skipped.append(SkippedEntry(src, verdict.reason_code))
                continue

            dst = os.path.join(dst_dir, bucket_for(name, stat, criteria), name)
            if os.path.lexists(dst):
                skipped.append(SkippedEntry(src, "destination_exists"))
                continue

            if not preview:
                try:
                    os.makedirs(os.path.dirname(dst), exist_ok=True)
                    shutil.move(src, dst)
                except OSError as e:
                    skipped.append(SkippedEntry(src, str(e)))
                    continue
                logger.info("Moved %s -> %s", src, dst)

            moved.append(MovedFile(src, dst))

        cleanup = None
        if cleanup_empty and not preview:
            cleanup = cleanup_empty_directories(src_dir, os.path.dirname(src_dir))

        verb = "Would move" if preview else "Moved"
        return OrganizerResult(
            path=src_dir,
            outcome=Outcome.SUCCESS,
            detail=f"{verb} {len(moved)} file(s) by {criteria.value}",
            moved=tuple(moved),
            skipped=tuple(skipped),
            cleanup=cleanup,
            dry_run=preview,
        )

    @staticmethod
    def _failed(path: str, detail: str) -> OrganizerResult:
        logger.warning(detail)
        return OrganizerResult(path=path, outcome=Outcome.FAILED, detail=detail)
