"""
Pytest configuration and shared fixtures for all pylox tests.

The compiler is stateless between compilations (fresh PassContext per call)
so one instance is shared by the whole session; runtimes hold global state
and are function-scoped unless a test class opts into sharing one.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from pylox.compiler.driver import CompilerDriver
from pylox.runtime.runtime import LoxRuntime


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_compiler():
    """
    Session-scoped compiler shared across ALL tests.

    - Parser is created once with lark's grammar cache
    - Safe to share: each compile() gets its own context
    """
    return CompilerDriver()


# =============================================================================
# Class-scoped fixtures (shared within a test class)
# =============================================================================

@pytest.fixture(scope="class")
def class_compiler(session_compiler):
    return session_compiler


@pytest.fixture(scope="class")
def class_runtime():
    """Class-scoped runtime: globals persist across the tests of one class."""
    return LoxRuntime()


# =============================================================================
# Function-scoped fixtures (default - one per test)
# =============================================================================

@pytest.fixture(scope="class")
def compiler(session_compiler):
    """Class-scoped compiler - shared across all tests in a class for performance."""
    return session_compiler


@pytest.fixture
def runtime():
    """Function-scoped runtime - fresh globals per test."""
    return LoxRuntime()


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
