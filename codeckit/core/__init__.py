"""
Core functionality for codeckit.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    CodecKitError,
    ConfigError,
    UnsupportedPlatformError,
    UnsupportedArchitectureError,
    ProvisioningError,
    DownloadError,
    ExtractionError,
    BuildError,
    PreflightError,
    ExternalToolError,
    VerificationError,
)

from .locking import LockManager, LockTimeout

from .platform import resolve_host_platform, prebuilt_tag

__all__ = [
    "CodecKitError",
    "ConfigError",
    "UnsupportedPlatformError",
    "UnsupportedArchitectureError",
    "ProvisioningError",
    "DownloadError",
    "ExtractionError",
    "BuildError",
    "PreflightError",
    "ExternalToolError",
    "VerificationError",
    "LockManager",
    "LockTimeout",
    "resolve_host_platform",
    "prebuilt_tag",
]
