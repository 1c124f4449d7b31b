"""Path policy: decides whether a path may be deleted or moved.

A PathPolicy wraps an immutable PolicyConfig assembled from the fixed
built-in entries plus the user's configuration. Checks run in a fixed order
(scope, protected path, protected name) and stop at the first failure, so a
request outside the sandbox learns nothing about protected paths inside it.
"""

import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path

from fsguard.core.config import GuardSettings, PolicyConfigError, load_settings
from fsguard.safety.defaults import (
    PROTECTED_NAME_PATTERNS,
    default_allowed_paths,
    system_protected_paths,
    user_protected_paths,
)
from fsguard.safety.models import PolicyChecks, RejectionReason, ValidationResult
from fsguard.safety.paths import basename, expand_path, is_same_path, is_strict_ancestor, is_within

logger = logging.getLogger(__name__)


def _dedupe(paths: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(paths))


def compile_patterns(sources: list[str] | tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    """Compile regex sources, failing on the first invalid one.

    Args:
        sources: Regular expression source strings.

    Returns:
        Tuple of compiled patterns in input order.

    Raises:
        PolicyConfigError: If a pattern does not compile.
    """
    compiled: list[re.Pattern[str]] = []
    for source in sources:
        try:
            compiled.append(re.compile(source))
        except re.error as e:
            msg = f"Invalid protected pattern {source!r}: {e}"
            raise PolicyConfigError(msg) from e
    return tuple(compiled)


@dataclass(frozen=True, slots=True)
class PolicyConfig:
    """Immutable, fully expanded policy inputs.

    Attributes:
        allowed_paths: Canonical allow-list roots. Empty rejects everything.
        protected_paths: Canonical protected paths (fixed + user additions).
        protected_patterns: Compiled name patterns (fixed + user additions).
    """

    allowed_paths: tuple[str, ...]
    protected_paths: tuple[str, ...]
    protected_patterns: tuple[re.Pattern[str], ...]

    @classmethod
    def build(
        cls,
        settings: GuardSettings | None = None,
        *,
        platform: str | None = None,
        home: Path | None = None,
    ) -> "PolicyConfig":
        """Assemble a policy from the fixed sets and user settings.

        User lists are unioned with, never substituted for, the fixed sets.

        Args:
            settings: User settings. Defaults to GuardSettings().
            platform: sys.platform value selecting the fixed sets.
            home: Home directory for user-critical paths and defaults.

        Returns:
            A PolicyConfig ready for evaluation.

        Raises:
            PolicyConfigError: If a user pattern is not a valid regex.
        """
        settings = settings or GuardSettings()
        platform = platform or sys.platform
        home = home or Path.home()

        if settings.allowed_paths is None:
            allowed = default_allowed_paths(home)
        else:
            allowed = settings.allowed_paths

        protected = [
            *system_protected_paths(platform),
            *user_protected_paths(platform, home),
            *settings.additional_protected_paths,
        ]

        return cls(
            allowed_paths=_dedupe([expand_path(p) for p in allowed]),
            protected_paths=_dedupe([expand_path(p) for p in protected]),
            protected_patterns=compile_patterns(
                (*PROTECTED_NAME_PATTERNS, *settings.additional_protected_patterns)
            ),
        )


class PathPolicy:
    """Evaluates deletion and move requests against a PolicyConfig.

    Args:
        config: Policy inputs to evaluate against.
    """

    def __init__(self, config: PolicyConfig) -> None:
        self._config = config

    @property
    def config(self) -> PolicyConfig:
        return self._config

    def is_within_allowed_scope(self, path: str) -> ValidationResult:
        """Check that a path equals or lies below an allow-list root.

        Fails closed: an empty allow-list rejects every path.
        """
        target = expand_path(path)
        allowed = self._config.allowed_paths

        if not allowed:
            return ValidationResult.reject(
                RejectionReason.NO_ALLOWED_PATHS,
                "No allowed paths configured. Add allowed_paths to your config file.",
            )

        for root in allowed:
            if is_within(target, root):
                return ValidationResult.ok()

        return ValidationResult.reject(
            RejectionReason.OUTSIDE_ALLOWED_SCOPE,
            f'"{target}" is outside allowed paths. Allowed: {", ".join(allowed)}',
        )

    def is_path_protected(self, path: str) -> ValidationResult:
        """Check that a path is neither protected nor a parent of a protected path."""
        target = expand_path(path)

        for protected in self._config.protected_paths:
            if is_same_path(target, protected):
                return ValidationResult.reject(
                    RejectionReason.PROTECTED_PATH,
                    f'"{target}" is a protected path and cannot be deleted.',
                )

        for protected in self._config.protected_paths:
            if is_strict_ancestor(target, protected):
                return ValidationResult.reject(
                    RejectionReason.PARENT_OF_PROTECTED,
                    f'"{target}" contains protected path "{protected}" and cannot be deleted.',
                )

        return ValidationResult.ok()

    def is_name_protected(self, name: str) -> ValidationResult:
        """Check a basename against the protected name patterns."""
        for pattern in self._config.protected_patterns:
            if pattern.search(name):
                return ValidationResult.reject(
                    RejectionReason.PROTECTED_NAME,
                    f'"{name}" matches protected pattern {pattern.pattern!r} and cannot be deleted.',
                )
        return ValidationResult.ok()

    def validate_deletion(self, path: str) -> ValidationResult:
        """Run scope, path and name checks in order, stopping at the first failure."""
        target = expand_path(path)

        result = self.is_within_allowed_scope(target)
        if result.safe:
            result = self.is_path_protected(target)
        if result.safe:
            result = self.is_name_protected(basename(target))

        if result.safe:
            logger.debug("Approved %s", target)
        else:
            logger.debug("Rejected %s: %s", target, result.reason)
        return result

    def checks(self, path: str) -> PolicyChecks:
        """Evaluate the sub-checks in validation order for reporting.

        Stops at the first failure, so a path outside the allowed scope
        reveals nothing about protected entries.
        """
        target = expand_path(path)
        scope = self.is_within_allowed_scope(target).safe
        if not scope:
            return PolicyChecks(scope=False)
        path_ok = self.is_path_protected(target).safe
        if not path_ok:
            return PolicyChecks(scope=True, path=False)
        return PolicyChecks(
            scope=True, path=True, name=self.is_name_protected(basename(target)).safe
        )


# Module-level cached policy instance
_cached_policy: PathPolicy | None = None


def load_policy(config_path: Path | None = None) -> PathPolicy:
    """Build a PathPolicy from the user's configuration file.

    Args:
        config_path: Config file to read. If None, uses the default path.

    Returns:
        A new PathPolicy.

    Raises:
        PolicyConfigError: If a configured pattern is not a valid regex.
    """
    return PathPolicy(PolicyConfig.build(load_settings(config_path)))


def get_policy() -> PathPolicy:
    """Get the process-wide policy, loading and caching it on first use.

    Returns:
        Cached PathPolicy instance.
    """
    global _cached_policy
    if _cached_policy is None:
        _cached_policy = load_policy()
    return _cached_policy


def reload_policy() -> PathPolicy:
    """Discard the cached policy and load it again from configuration.

    Returns:
        Newly loaded PathPolicy instance.
    """
    global _cached_policy
    _cached_policy = None
    return get_policy()


def require_policy() -> PathPolicy:
    """Get the process-wide policy or exit with a helpful error message.

    Returns:
        Cached PathPolicy.

    Raises:
        typer.Exit: If the configuration holds an invalid pattern.
    """
    import typer

    from fsguard.utils.formatting import print_error, print_info

    try:
        return get_policy()
    except PolicyConfigError as e:
        print_error(str(e))
        print_info("Fix additional_protected_patterns in your config file.")
        raise typer.Exit(code=1) from e
