"""Pytest configuration and shared fixtures for the richtext test suite."""

import json
import logging
import os
from pathlib import Path
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "richtext"

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=30)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "fuzzing: Property-based tests")


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the JSON fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def article_json() -> dict[str, Any]:
    """A document exercising every node shape.

    Returns
    -------
    dict
        Freshly loaded wire JSON; tests may mutate it.

    """
    return json.loads((FIXTURES_DIR / "article.json").read_text(encoding="utf-8"))


@pytest.fixture
def includes_json() -> dict[str, Any]:
    """Delivery API style includes for the links in ``article_json``."""
    return json.loads((FIXTURES_DIR / "includes.json").read_text(encoding="utf-8"))


@pytest.fixture(autouse=True)
def restore_package_logging():
    """Undo configure_logging on the richtext package logger."""
    package_logger = logging.getLogger("richtext")
    level, propagate = package_logger.level, package_logger.propagate
    yield
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(level)
    package_logger.propagate = propagate
