"""
Mock implementations for testing codeckit components.

This package provides test doubles for external processes so builds can be
exercised without running configure or make.
"""

from .process import RecordingRunner

__all__ = [
    "RecordingRunner",
]
