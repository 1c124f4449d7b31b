"""Safety validation and controlled mutation.

This module provides the path policy, guarded deletion with previews,
bounded empty-directory cleanup, policy-gated moves and renames, and
content-based duplicate detection.
"""

from fsguard.safety.cleanup import cleanup_empty_directories, remove_empty_directory
from fsguard.safety.guard import DeletionGuard, guarded_cleanup, preview_deletion
from fsguard.safety.hasher import ContentHasher, ScanError
from fsguard.safety.models import (
    CleanupResult,
    DuplicateGroup,
    EntryKind,
    GuardResult,
    MovedFile,
    OrganizerResult,
    Outcome,
    PolicyChecks,
    PreviewItem,
    RejectionReason,
    SkippedEntry,
    ValidationResult,
)
from fsguard.safety.organizer import FileOrganizer, OrganizeCriteria
from fsguard.safety.paths import expand_path
from fsguard.safety.policy import PathPolicy, PolicyConfig, get_policy, reload_policy

__all__ = [
    "CleanupResult",
    "ContentHasher",
    "DeletionGuard",
    "DuplicateGroup",
    "EntryKind",
    "FileOrganizer",
    "GuardResult",
    "MovedFile",
    "OrganizeCriteria",
    "OrganizerResult",
    "Outcome",
    "PathPolicy",
    "PolicyChecks",
    "PolicyConfig",
    "PreviewItem",
    "RejectionReason",
    "ScanError",
    "SkippedEntry",
    "ValidationResult",
    "cleanup_empty_directories",
    "expand_path",
    "get_policy",
    "guarded_cleanup",
    "preview_deletion",
    "reload_policy",
    "remove_empty_directory",
]
