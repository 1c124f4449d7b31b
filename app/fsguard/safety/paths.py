"""Path canonicalisation and segment-wise containment helpers.

Every policy comparison goes through these helpers. Containment is decided
on path components, never on string prefixes, so /data/foo is not treated
as containing /data/foobar.
"""

import os
from pathlib import Path, PurePath


def expand_path(path: str | os.PathLike[str]) -> str:
    """Expand a home-relative shorthand and return an absolute path.

    "~", "~/..." and "~\\..." are resolved against Path.home(). The result is
    made absolute and normalised lexically; symlinks are not followed.

    Args:
        path: Raw path string or path-like object.

    Returns:
        Canonical absolute path string.
    """
    raw = os.fspath(path)
    if raw == "~" or raw.startswith(("~/", "~\\")):
        raw = str(Path.home()) + raw[1:]
    return os.path.abspath(raw)


def _segments(path: str) -> tuple[str, ...]:
    return PurePath(os.path.normcase(path)).parts


def is_same_path(a: str, b: str) -> bool:
    """Check whether two canonical paths name the same location."""
    return _segments(a) == _segments(b)


def is_within(path: str, root: str) -> bool:
    """Check whether path equals root or lies below it.

    Args:
        path: Canonical path to test.
        root: Canonical candidate ancestor.

    Returns:
        True if every component of root prefixes path.
    """
    path_parts = _segments(path)
    root_parts = _segments(root)
    return path_parts[: len(root_parts)] == root_parts


def is_strict_ancestor(ancestor: str, path: str) -> bool:
    """Check whether ancestor contains path and is not path itself."""
    ancestor_parts = _segments(ancestor)
    path_parts = _segments(path)
    return (
        len(ancestor_parts) < len(path_parts)
        and path_parts[: len(ancestor_parts)] == ancestor_parts
    )


def basename(path: str) -> str:
    """Return the final component of a canonical path ("" for a root)."""
    return PurePath(path).name
