"""Value objects produced by the safety layer.

Every result here is created per call and is immutable. Policy rejections,
operational failures and successes are told apart by the Outcome field of
GuardResult and the organizer results.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RejectionReason(str, Enum):
    """Why a request was refused before touching the filesystem.

    Attributes:
        NO_ALLOWED_PATHS: The allow-list is empty.
        OUTSIDE_ALLOWED_SCOPE: Path is not below any allow-list root.
        PROTECTED_PATH: Path is itself protected.
        PARENT_OF_PROTECTED: Path contains a protected path.
        PROTECTED_NAME: Basename matches a protected pattern.
        RECURSIVE_REQUIRES_CONFIRMATION: Recursive deletion without confirmation.
        NOT_EMPTY: Non-recursive deletion of a directory with entries.
    """

    NO_ALLOWED_PATHS = "no_allowed_paths"
    OUTSIDE_ALLOWED_SCOPE = "outside_allowed_scope"
    PROTECTED_PATH = "protected_path"
    PARENT_OF_PROTECTED = "parent_of_protected"
    PROTECTED_NAME = "protected_name"
    RECURSIVE_REQUIRES_CONFIRMATION = "recursive_requires_confirmation"
    NOT_EMPTY = "not_empty"


class Outcome(str, Enum):
    """Overall shape of an operation result."""

    SUCCESS = "success"
    REJECTED = "rejected"
    FAILED = "failed"


class EntryKind(str, Enum):
    """Kind of filesystem entry listed in a preview."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Verdict of a policy check.

    Attributes:
        safe: True if the check passed.
        reason: Rejection reason, None when safe.
        detail: Human-readable explanation, None when safe.
    """

    safe: bool
    reason: RejectionReason | None = None
    detail: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(safe=True)

    @classmethod
    def reject(cls, reason: RejectionReason, detail: str) -> "ValidationResult":
        return cls(safe=False, reason=reason, detail=detail)

    @property
    def reason_code(self) -> str:
        """Reason value for reporting, "ok" when safe."""
        return self.reason.value if self.reason else "ok"


@dataclass(frozen=True, slots=True)
class PolicyChecks:
    """Pass/fail state of the three policy sub-checks, for reporting.

    Checks after the first failing one are not evaluated and stay None.
    """

    scope: bool
    path: bool | None = None
    name: bool | None = None

    def to_dict(self) -> dict[str, bool | None]:
        return {"scope": self.scope, "path": self.path, "name": self.name}


@dataclass(frozen=True, slots=True)
class PreviewItem:
    """One entry an operation would touch.

    Attributes:
        path: Absolute path of the entry.
        kind: File or directory.
        size: Size in bytes for files, None for directories.
    """

    path: str
    kind: EntryKind
    size: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"path": self.path, "kind": self.kind.value}
        if self.size is not None:
            data["size"] = self.size
        return data


@dataclass(frozen=True, slots=True)
class SkippedEntry:
    """An entry an operation stopped at or left in place, with the reason."""

    path: str
    reason: str


@dataclass(frozen=True, slots=True)
class CleanupResult:
    """Outcome of an upward empty-directory cleanup.

    Attributes:
        removed: Directories removed, in walk order (deepest first).
        skipped: Directories the walk stopped at (at most one).
    """

    removed: tuple[str, ...] = ()
    skipped: tuple[SkippedEntry, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "removed": list(self.removed),
            "skipped": [{"path": s.path, "reason": s.reason} for s in self.skipped],
        }


@dataclass(frozen=True, slots=True)
class DuplicateGroup:
    """Files sharing one content digest.

    Attributes:
        digest: Hex digest of the shared content.
        paths: Sorted paths of the identical files (two or more).
        size: Size in bytes of each file.
    """

    digest: str
    paths: tuple[str, ...]
    size: int

    def __post_init__(self) -> None:
        if len(self.paths) < 2:
            msg = f"A duplicate group needs at least 2 paths, got {len(self.paths)}"
            raise ValueError(msg)

    @property
    def wasted_bytes(self) -> int:
        """Bytes that would be freed by keeping a single copy."""
        return self.size * (len(self.paths) - 1)

    def to_dict(self) -> dict[str, Any]:
        return {"digest": self.digest, "paths": list(self.paths), "size": self.size}


@dataclass(frozen=True, slots=True)
class GuardResult:
    """Result of a guarded deletion request.

    Attributes:
        path: Canonical path the request targeted.
        outcome: Success, policy rejection or operational failure.
        checks: State of the three policy sub-checks.
        reason: Rejection reason (only for REJECTED).
        detail: Explanation for rejections and failures, summary on success.
        preview: Entries the request touches (filled for previews).
        cleanup: Result of the optional empty-parent cleanup.
        dry_run: True if this was a preview and nothing was changed.
    """

    path: str
    outcome: Outcome
    checks: PolicyChecks
    reason: RejectionReason | None = None
    detail: str | None = None
    preview: tuple[PreviewItem, ...] = ()
    cleanup: CleanupResult | None = None
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "outcome": self.outcome.value,
            "reason": self.reason.value if self.reason else None,
            "detail": self.detail,
            "checks": self.checks.to_dict(),
            "preview": [item.to_dict() for item in self.preview],
            "cleanup": self.cleanup.to_dict() if self.cleanup else None,
            "dry_run": self.dry_run,
        }


@dataclass(frozen=True, slots=True)
class MovedFile:
    """A file relocated by the organizer."""

    source: str
    destination: str


@dataclass(frozen=True, slots=True)
class OrganizerResult:
    """Result of a move, rename or organize request.

    Attributes:
        path: Canonical source path (file or directory) of the request.
        outcome: Success, policy rejection or operational failure.
        reason: Rejection reason (only for REJECTED).
        detail: Explanation for rejections and failures, summary on success.
        moved: Files moved or renamed (planned ones when dry_run).
        skipped: Files left in place, with reasons.
        cleanup: Result of the optional empty-directory cleanup.
        dry_run: True if nothing was changed.
    """

    path: str
    outcome: Outcome
    reason: RejectionReason | None = None
    detail: str | None = None
    moved: tuple[MovedFile, ...] = ()
    skipped: tuple[SkippedEntry, ...] = ()
    cleanup: CleanupResult | None = None
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "outcome": self.outcome.value,
            "reason": self.reason.value if self.reason else None,
            "detail": self.detail,
            "moved": [{"source": m.source, "destination": m.destination} for m in self.moved],
            "skipped": [{"path": s.path, "reason": s.reason} for s in self.skipped],
            "cleanup": self.cleanup.to_dict() if self.cleanup else None,
            "dry_run": self.dry_run,
        }
