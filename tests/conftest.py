"""
Pytest configuration for the phpsorter test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Temp directory and config isolation fixtures
- Buffer/parse helpers for PHP snippets
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from phpsorter.logging_config import setup_logging


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest for machine-mode operation."""
    os.environ.setdefault("PHPSORTER_MACHINE_MODE", "1")
    config.addinivalue_line("markers", "fast: quick unit tests")
    config.addinivalue_line("markers", "integration: tests that touch the filesystem or CLI")


# ============================================================================
# LOGGING FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True)


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="phpsorter_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def isolated_config(temp_dir, monkeypatch):
    """
    Run with an empty home and project directory so no real config leaks in.

    Returns:
        The project directory (also the CWD)
    """
    from phpsorter.paths import reset_paths
    from phpsorter.user_config import reset_user_config

    home = temp_dir / "home"
    project = temp_dir / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    reset_paths()
    reset_user_config()
    yield project
    reset_paths()
    reset_user_config()


# ============================================================================
# PHP HELPERS
# ============================================================================

@pytest.fixture
def php_buffer():
    """Factory: PHP source text -> LineBuffer."""
    from phpsorter.mutation import LineBuffer

    def make(source: str, name: str = "test.php"):
        return LineBuffer.from_text(source, name=name, language="php")

    return make


@pytest.fixture
def parse_php():
    """Factory: LineBuffer -> SyntaxTree."""
    from phpsorter.parser import TreeProvider

    provider = TreeProvider()
    return provider.parse
