"""Reusable FFmpeg source fixtures for testing.

The configure stub contains the shared-library naming assignments found in
upstream FFmpeg so the naming rewrite can be exercised without a real
checkout.
"""

from pathlib import Path

import pytest

FFMPEG_VERSION = "6.1.1"

CONFIGURE_STUB = """#!/bin/sh
#
# FFmpeg configure script (test stub)

SLIBNAME_WITH_VERSION='$(SLIBNAME).$(LIBVERSION)'
SLIBNAME_WITH_MAJOR='$(SLIBNAME).$(LIBMAJOR)'
LIB_INSTALL_EXTRA_CMD='$$(RANLIB) "$(LIBDIR)/$(LIBNAME)"'
SLIB_INSTALL_NAME='$(SLIBNAME_WITH_VERSION)'
SLIB_INSTALL_LINKS='$(SLIBNAME_WITH_MAJOR) $(SLIBNAME)'

case $target_os in
    linux)
        SHFLAGS='-shared -Wl,-soname,$$(@F)'
        ;;
    android)
        SHFLAGS='-shared -Wl,-soname,$$(@F)'
        ;;
esac
"""


def create_ffmpeg_source(root: Path, configure: str = CONFIGURE_STUB) -> Path:
    """Create a source checkout holding only the configure stub."""
    root.mkdir(parents=True)
    script = root / "configure"
    script.write_text(configure)
    script.chmod(0o755)
    return root


@pytest.fixture
def mock_ffmpeg_source(tmp_path) -> Path:
    """
    Create a mock FFmpeg source checkout.

    Example:
        def test_patch(mock_ffmpeg_source):
            assert (mock_ffmpeg_source / "configure").exists()
    """
    return create_ffmpeg_source(tmp_path / f"ffmpeg-{FFMPEG_VERSION}")
