"""
Pytest configuration and shared fixtures for all treefold tests.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from treefold.frontend import Parser
from treefold.algebras import count_table, height_table, reshape_table


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_parser():
    """
    Session-scoped parser shared across ALL tests.

    The Lark instance is stateless between parses, so sharing is safe.
    """
    return Parser(cache_file=False)


@pytest.fixture
def parser(session_parser):
    return session_parser


# =============================================================================
# Handler tables (reused across folds, as callers do)
# =============================================================================

@pytest.fixture(scope="session")
def counting():
    return count_table()


@pytest.fixture(scope="session")
def measuring():
    return height_table()


@pytest.fixture(scope="session")
def reshaping():
    return reshape_table()


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
