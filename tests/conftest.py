"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Iterator
from pathlib import Path

import pytest
from fsguard.safety import policy as policy_module
from fsguard.safety.defaults import PROTECTED_NAME_PATTERNS
from fsguard.safety.policy import PathPolicy, PolicyConfig, compile_patterns


@pytest.fixture(autouse=True)
def reset_policy_cache() -> Iterator[None]:
    """Drop the process-wide cached policy around every test."""
    policy_module._cached_policy = None
    yield
    policy_module._cached_policy = None


@pytest.fixture
def sandbox(tmp_path: Path) -> Path:
    """Directory acting as the only allow-list root."""
    root = tmp_path / "work"
    root.mkdir()
    return root


@pytest.fixture
def policy(sandbox: Path) -> PathPolicy:
    """Policy allowing the sandbox, with the fixed name patterns and no protected paths."""
    return PathPolicy(
        PolicyConfig(
            allowed_paths=(str(sandbox),),
            protected_paths=(),
            protected_patterns=compile_patterns(PROTECTED_NAME_PATTERNS),
        )
    )
