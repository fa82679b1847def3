"""Test fixtures for codeckit tests.

This package provides reusable pytest fixtures for testing codeckit components.
Fixtures are organized by type:

- ndk: Mock NDK install trees and release archives
- sources: Mock FFmpeg source checkouts

Import fixtures in your tests using:
    from tests.fixtures.ndk import mock_ndk_home
    from tests.fixtures.sources import mock_ffmpeg_source
"""

__all__ = [
    "ndk",
    "sources",
]
