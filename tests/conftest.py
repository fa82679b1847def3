"""
Pytest configuration and shared fixtures for codeckit tests.
"""

import logging
from pathlib import Path

import pytest

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.ndk import mock_ndk_home, ndk_install_root, ndk_archive
from tests.fixtures.sources import mock_ffmpeg_source


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access or real tools",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo logging.basicConfig(force=True) calls made by CLI tests."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home


@pytest.fixture
def no_ndk_env(monkeypatch):
    """Unset ANDROID_NDK_HOME for the duration of a test."""
    monkeypatch.delenv("ANDROID_NDK_HOME", raising=False)


@pytest.fixture
def no_network(monkeypatch):
    """Disable network access for tests."""
    import socket

    def guard(*args, **kwargs):
        raise RuntimeError("Network access not allowed in this test")

    monkeypatch.setattr(socket, "socket", guard)
