"""Pytest configuration and shared fixtures for deflink tests."""

import os
import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from deflink.lib.ast_cache import ASTCache
from deflink.models.config import DefLinkConfig
from deflink.models.definition import Definition


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test file operations.

    Yields:
        Path to temporary directory

    Cleanup:
        Automatically removes directory after test
    """
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def isolated_env() -> Generator[dict[str, str], None, None]:
    """Provide isolated environment variables for testing.

    Saves current environment and restores after test.

    Yields:
        Dictionary of original environment variables

    Cleanup:
        Restores original environment after test
    """
    original_env = os.environ.copy()
    yield original_env
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def fixture_dir() -> Path:
    """Get path to test fixtures directory.

    Returns:
        Path to tests/fixtures directory
    """
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def cache() -> ASTCache:
    """Provide a fresh tree cache so tests never share parse results."""
    return ASTCache(capacity=16)


@pytest.fixture
def term1() -> Definition:
    """Definition parsed from '# Term1' with aliases Alias1 and Alias2."""
    return Definition(
        source_id="test.md",
        heading="Term1",
        aliases=["Term1", "Alias1", "Alias2"],
    )


@pytest.fixture
def make_vault(temp_dir: Path) -> Callable[[dict[str, str]], Path]:
    """Create a vault directory from a ``{relative path: content}`` mapping.

    Returns:
        Callable writing the files and returning the vault root
    """

    def _make(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            path = temp_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        return temp_dir

    return _make


@pytest.fixture
def default_config() -> DefLinkConfig:
    """Default configuration (definitions folder 'definitions')."""
    return DefLinkConfig()


# Configure pytest
def pytest_configure(config: Any) -> None:
    """Configure pytest with marker options."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests",
    )
    config.addinivalue_line(
        "markers",
        "unit: marks tests as unit tests",
    )
