"""Content hashing and duplicate detection.

Walks a directory tree sequentially in sorted order, hashes every regular
file and groups files by digest. Files that cannot be read are skipped so a
single bad entry never fails a whole scan.
"""

import hashlib
import logging
import os
from collections.abc import Iterator
from pathlib import Path

from fsguard.safety.models import DuplicateGroup
from fsguard.safety.paths import expand_path

logger = logging.getLogger(__name__)

# Read size for streaming file content into the digest
CHUNK_SIZE = 1024 * 1024


class ScanError(Exception):
    """Raised when a scan root does not exist or is not a directory."""


class ContentHasher:
    """Computes content digests and groups identical files.

    MD5 is used for speed and stability across platforms; collisions are
    only a concern for adversarial input, which is out of scope here.

    Args:
        chunk_size: Bytes read per iteration while hashing.
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE) -> None:
        self._chunk_size = chunk_size

    def hash_file(self, path: str | Path) -> str:
        """Return the hex digest of a file's full content.

        Raises:
            OSError: If the file cannot be read.
        """
        digest = hashlib.md5(usedforsecurity=False)
        with open(path, "rb") as f:
            while chunk := f.read(self._chunk_size):
                digest.update(chunk)
        return digest.hexdigest()

    def iter_files(self, root: str, recursive: bool = True) -> Iterator[tuple[str, int]]:
        """Yield (path, size) for regular files below root.

        Symlinks are neither followed nor reported. Directories that cannot
        be listed are logged and skipped.

        Args:
            root: Canonical directory path.
            recursive: Descend into subdirectories.

        Yields:
            Tuples of absolute file path and size in bytes.
        """
        try:
            with os.scandir(root) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.warning("Cannot list directory %s: %s", root, e)
            return

        for entry in entries:
            try:
                if entry.is_symlink():
                    continue
                if entry.is_dir(follow_symlinks=False):
                    if recursive:
                        yield from self.iter_files(entry.path, recursive=True)
                    continue
                if entry.is_file(follow_symlinks=False):
                    yield entry.path, entry.stat(follow_symlinks=False).st_size
            except OSError as e:
                logger.warning("Skipping unreadable entry %s: %s", entry.path, e)

    def find_duplicates(self, root: str, recursive: bool = True) -> list[DuplicateGroup]:
        """Group files under root by identical content.

        Args:
            root: Directory to scan.
            recursive: Include subdirectories.

        Returns:
            Duplicate groups, largest files first, then by digest.

        Raises:
            ScanError: If root does not exist or is not a directory.
        """
        target = expand_path(root)
        if not os.path.isdir(target):
            msg = f"Not a directory: {target}"
            raise ScanError(msg)

        by_digest: dict[str, list[str]] = {}
        sizes: dict[str, int] = {}

        for path, size in self.iter_files(target, recursive=recursive):
            try:
                digest = self.hash_file(path)
            except OSError as e:
                logger.warning("Skipping file that cannot be hashed %s: %s", path, e)
                continue
            by_digest.setdefault(digest, []).append(path)
            sizes.setdefault(digest, size)

        groups = [
            DuplicateGroup(digest=digest, paths=tuple(sorted(paths)), size=sizes[digest])
            for digest, paths in by_digest.items()
            if len(paths) > 1
        ]
        groups.sort(key=lambda g: (-g.size, g.digest))
        logger.debug("Found %d duplicate groups under %s", len(groups), target)
        return groups
