"""Pytest configuration and shared fixtures for the mathfield test suite.

This module provides shared fixtures and test configuration used across the
entire test suite.
"""

from __future__ import annotations

import pytest

from mathfield.controller import MathDocument
from mathfield.core.cursor import Cursor
from mathfield.core.nodes import RootBlock

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    # Register custom Hypothesis profiles
    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=20)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    # Load profile from environment or use default
    import os

    profile = os.getenv("HYPOTHESIS_PROFILE", "dev")
    settings.load_profile(profile)
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def root() -> RootBlock:
    """Provide an empty document root."""
    return RootBlock()


@pytest.fixture
def cursor(root: RootBlock) -> Cursor:
    """Provide a cursor at the start of the ``root`` fixture."""
    return Cursor(root)


@pytest.fixture
def doc() -> MathDocument:
    """Provide an empty document with default options."""
    return MathDocument()
