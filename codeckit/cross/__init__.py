"""
Cross-compilation support for codeckit.

This package provides the Android ABI profile table used to drive builds.
"""

from .targets import (
    ArchitectureProfile,
    DEFAULT_ARCHITECTURE,
    MIN_ANDROID_API,
    configure_architecture,
    supported_architectures,
)

__all__ = [
    "ArchitectureProfile",
    "DEFAULT_ARCHITECTURE",
    "MIN_ANDROID_API",
    "configure_architecture",
    "supported_architectures",
]
