"""Shared fixtures for CLI command tests."""

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from deflink.lib.logging_config import ROOT_LOGGER_NAME

GLOSSARY = "# Term1\naliases: Alias1, Alias2\n\n# Term2\naliases: Other\n"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Drop handlers bound to the runner's streams after each invocation."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def sample_vault(make_vault: Callable[[dict[str, str]], Path]) -> Path:
    """Vault with one glossary document and three notes."""
    return make_vault(
        {
            "definitions/terms.md": GLOSSARY,
            "notes/linked.md": "Talk about Term1 and alias1.\n",
            "notes/plain.md": "Nothing to link here.\n",
            "notes/code.md": "```\nTerm1\n```\n",
        }
    )
