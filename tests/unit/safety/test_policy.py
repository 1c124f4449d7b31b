"""Unit tests for the path policy.

Tests for PolicyConfig assembly, the three sub-checks, their evaluation
order, and the process-wide policy cache.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from fsguard.core.config import GuardSettings, PolicyConfigError
from fsguard.safety import policy as policy_module
from fsguard.safety.defaults import (
    PROTECTED_NAME_PATTERNS,
    SYSTEM_PROTECTED_PATHS_MACOS,
    SYSTEM_PROTECTED_PATHS_POSIX,
    SYSTEM_PROTECTED_PATHS_WINDOWS,
    default_allowed_paths,
    system_protected_paths,
    user_protected_paths,
)
from fsguard.safety.models import RejectionReason
from fsguard.safety.policy import (
    PathPolicy,
    PolicyConfig,
    compile_patterns,
    get_policy,
    load_policy,
    reload_policy,
)


def make_policy(
    allowed: tuple[str, ...] = ("/home/u/projects",),
    protected: tuple[str, ...] = ("/home/u",),
) -> PathPolicy:
    return PathPolicy(
        PolicyConfig(
            allowed_paths=allowed,
            protected_paths=protected,
            protected_patterns=compile_patterns(PROTECTED_NAME_PATTERNS),
        )
    )


class TestDefaults:
    """Tests for the built-in protected and allowed entries."""

    def test_platform_selects_system_set(self) -> None:
        """Each platform gets its own fixed system set."""
        assert system_protected_paths("linux") == SYSTEM_PROTECTED_PATHS_POSIX
        assert system_protected_paths("darwin") == SYSTEM_PROTECTED_PATHS_MACOS
        assert system_protected_paths("win32") == SYSTEM_PROTECTED_PATHS_WINDOWS

    def test_macos_set_extends_posix(self) -> None:
        """macOS protects everything POSIX does plus its own roots."""
        assert set(SYSTEM_PROTECTED_PATHS_POSIX) < set(SYSTEM_PROTECTED_PATHS_MACOS)
        assert "/System" in SYSTEM_PROTECTED_PATHS_MACOS

    def test_user_paths_include_home_and_credentials(self) -> None:
        """Home and the credential directories are always protected."""
        paths = user_protected_paths("linux", Path("/home/u"))
        assert "/home/u" in paths
        assert "/home/u/.ssh" in paths
        assert "/home/u/.gnupg" in paths
        assert "/home/u/.aws" in paths

    def test_user_paths_per_platform(self) -> None:
        """macOS adds Library, Windows adds AppData."""
        assert "/home/u/Library" in user_protected_paths("darwin", Path("/home/u"))
        assert "/home/u/Library" not in user_protected_paths("linux", Path("/home/u"))

    def test_default_allowed_never_home(self) -> None:
        """Default allow-list roots live below home, never at home."""
        allowed = default_allowed_paths(Path("/home/u"))
        assert "/home/u/projects" in allowed
        assert "/home/u" not in allowed


class TestPolicyConfigBuild:
    """Tests for PolicyConfig.build."""

    def test_unset_allowed_paths_uses_defaults(self) -> None:
        """A missing allowed_paths key selects the default allow-list."""
        config = PolicyConfig.build(GuardSettings(), platform="linux", home=Path("/home/u"))
        assert "/home/u/projects" in config.allowed_paths

    def test_empty_allowed_paths_kept_empty(self) -> None:
        """An explicit empty list is not replaced by defaults."""
        settings = GuardSettings(allowed_paths=[])
        config = PolicyConfig.build(settings, platform="linux", home=Path("/home/u"))
        assert config.allowed_paths == ()

    def test_user_entries_extend_fixed_sets(self) -> None:
        """Additional paths and patterns are unioned with the fixed ones."""
        settings = GuardSettings(
            allowed_paths=["/srv/data"],
            additional_protected_paths=["/srv/data/keep"],
            additional_protected_patterns=[r"^\.terraform$"],
        )
        config = PolicyConfig.build(settings, platform="linux", home=Path("/home/u"))

        assert "/srv/data/keep" in config.protected_paths
        assert "/etc" in config.protected_paths
        assert "/home/u/.ssh" in config.protected_paths
        sources = [p.pattern for p in config.protected_patterns]
        assert r"^\.git$" in sources
        assert r"^\.terraform$" in sources

    def test_paths_are_expanded_and_deduplicated(self) -> None:
        """Tilde entries are expanded and duplicates removed."""
        settings = GuardSettings(allowed_paths=["~/tmp", "/home/u/tmp", "/home/u/tmp/"])
        with patch.object(Path, "home", return_value=Path("/home/u")):
            config = PolicyConfig.build(settings, platform="linux", home=Path("/home/u"))
        assert config.allowed_paths == ("/home/u/tmp",)

    def test_invalid_pattern_raises(self) -> None:
        """A pattern that does not compile fails the build."""
        settings = GuardSettings(additional_protected_patterns=["[unclosed"])
        with pytest.raises(PolicyConfigError, match="unclosed"):
            PolicyConfig.build(settings, platform="linux", home=Path("/home/u"))


class TestAllowedScope:
    """Tests for is_within_allowed_scope."""

    def test_inside_root_allowed(self) -> None:
        """Descendants of an allow-list root pass."""
        assert make_policy().is_within_allowed_scope("/home/u/projects/a/b.txt").safe

    def test_root_itself_allowed(self) -> None:
        """The root itself is in scope."""
        assert make_policy().is_within_allowed_scope("/home/u/projects").safe

    def test_sibling_prefix_rejected(self) -> None:
        """A sibling sharing a textual prefix is outside scope."""
        result = make_policy().is_within_allowed_scope("/home/u/projects2/file")
        assert result.safe is False
        assert result.reason == RejectionReason.OUTSIDE_ALLOWED_SCOPE
        assert "/home/u/projects" in (result.detail or "")

    def test_empty_allow_list_rejects_everything(self) -> None:
        """No allow-list means no mutation anywhere."""
        result = make_policy(allowed=()).is_within_allowed_scope("/home/u/projects/a")
        assert result.safe is False
        assert result.reason == RejectionReason.NO_ALLOWED_PATHS


class TestProtectedPath:
    """Tests for is_path_protected."""

    def test_exact_match(self) -> None:
        """A protected path itself is rejected."""
        result = make_policy().is_path_protected("/home/u")
        assert result.reason == RejectionReason.PROTECTED_PATH

    def test_parent_of_protected(self) -> None:
        """An ancestor of a protected path is rejected."""
        result = make_policy().is_path_protected("/home")
        assert result.reason == RejectionReason.PARENT_OF_PROTECTED
        assert "/home/u" in (result.detail or "")

    def test_descendant_of_protected_not_flagged(self) -> None:
        """Paths below a protected path are not themselves protected."""
        assert make_policy().is_path_protected("/home/u/projects/a").safe

    def test_sibling_prefix_not_parent(self) -> None:
        """/home/u2 does not contain /home/u."""
        policy = make_policy(protected=("/home/u2",))
        assert policy.is_path_protected("/home/u").safe

    def test_exact_match_wins_over_ancestry(self) -> None:
        """A path that is both protected and a parent reports the exact match."""
        policy = make_policy(protected=("/home/u/projects", "/home"))
        result = policy.is_path_protected("/home")
        assert result.reason == RejectionReason.PROTECTED_PATH


class TestProtectedName:
    """Tests for is_name_protected."""

    @pytest.mark.parametrize(
        "name",
        [".git", ".ssh", ".env", ".env.local", "id_rsa", "server.pem", "credentials", "secret"],
    )
    def test_protected_names(self, name: str) -> None:
        """Well-known sensitive names are rejected."""
        result = make_policy().is_name_protected(name)
        assert result.safe is False
        assert result.reason == RejectionReason.PROTECTED_NAME

    @pytest.mark.parametrize("name", ["notes.txt", ".gitignore", "my.env", "secretary"])
    def test_ordinary_names(self, name: str) -> None:
        """Look-alike names are allowed."""
        assert make_policy().is_name_protected(name).safe


class TestValidateDeletion:
    """Tests for validate_deletion ordering and examples."""

    def test_file_in_allowed_root_approved(self) -> None:
        """A plain file inside the allow-list passes every check."""
        assert make_policy().validate_deletion("/home/u/projects/tmp/a.txt").safe

    def test_home_rejected_as_protected(self) -> None:
        """Home is protected even though it contains the allowed root."""
        policy = make_policy(allowed=("/home/u/projects", "/home/u"))
        result = policy.validate_deletion("/home/u")
        assert result.reason == RejectionReason.PROTECTED_PATH

    def test_scope_checked_first(self) -> None:
        """Out-of-scope requests never reveal protection details."""
        result = make_policy().validate_deletion("/home/u")
        assert result.reason == RejectionReason.OUTSIDE_ALLOWED_SCOPE

    def test_name_checked_last(self) -> None:
        """A protected name inside the allowed root is caught."""
        result = make_policy().validate_deletion("/home/u/projects/repo/.git")
        assert result.reason == RejectionReason.PROTECTED_NAME

    def test_tilde_input_expanded(self) -> None:
        """Raw "~" strings are compared after expansion."""
        with patch.object(Path, "home", return_value=Path("/home/u")):
            assert make_policy().validate_deletion("~/projects/a.txt").safe

    def test_checks_stop_after_scope_failure(self) -> None:
        """Out-of-scope paths report nothing about protected entries."""
        checks = make_policy().checks("/etc/.git")
        assert checks.to_dict() == {"scope": False, "path": None, "name": None}

    def test_checks_stop_after_protected_path(self) -> None:
        """A protected path leaves the name check unevaluated."""
        checks = make_policy(allowed=("/",)).checks("/home")
        assert checks.to_dict() == {"scope": True, "path": False, "name": None}

    def test_checks_all_evaluated_in_scope(self) -> None:
        """An unprotected in-scope path reports every sub-check."""
        checks = make_policy().checks("/home/u/projects/repo/.git")
        assert checks.to_dict() == {"scope": True, "path": True, "name": False}


class TestPolicyCache:
    """Tests for load_policy, get_policy and reload_policy."""

    def test_load_policy_reads_config(self, tmp_path: Path) -> None:
        """load_policy builds from the given config file."""
        config_file = tmp_path / "config.toml"
        config_file.write_text(f'allowed_paths = ["{tmp_path / "data"}"]\n')

        policy = load_policy(config_file)

        assert policy.config.allowed_paths == (str(tmp_path / "data"),)

    def test_get_policy_caches(self) -> None:
        """get_policy loads once and returns the same instance."""
        with patch(
            "fsguard.safety.policy.load_policy", return_value=make_policy()
        ) as mock_load:
            first = get_policy()
            second = get_policy()

        assert first is second
        mock_load.assert_called_once()

    def test_reload_policy_replaces_cache(self) -> None:
        """reload_policy discards the cached instance."""
        old = make_policy()
        new = make_policy(allowed=("/srv",))
        policy_module._cached_policy = old

        with patch("fsguard.safety.policy.load_policy", return_value=new):
            assert reload_policy() is new
        assert get_policy() is new
