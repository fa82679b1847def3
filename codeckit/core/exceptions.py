"""
Centralized exception hierarchy for codeckit.

Every fatal condition of the provisioning and build workflows maps to one
of these exceptions. None of them is retried automatically.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class CodecKitError(Exception):
    """Base exception for all codeckit errors."""

    pass


class ConfigError(CodecKitError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Host / Target Exceptions
# ============================================================================


class UnsupportedPlatformError(CodecKitError):
    """Raised when the host operating system has no NDK distribution."""

    def __init__(self, system: str):
        self.system = system
        super().__init__(f"Unsupported host platform: {system}")


class UnsupportedArchitectureError(CodecKitError):
    """Raised when a target architecture name is not in the profile table."""

    def __init__(self, name: str, supported: Sequence[str] = ()):
        self.name = name
        self.supported = list(supported)
        msg = f"Unsupported architecture: {name}"
        if self.supported:
            msg += f". Supported: {', '.join(self.supported)}"
        super().__init__(msg)


# ============================================================================
# Provisioning Exceptions
# ============================================================================


class ProvisioningError(CodecKitError):
    """Base exception for NDK provisioning errors."""

    pass


class DownloadError(ProvisioningError):
    """Raised when every download transport failed."""

    pass


class ExtractionError(ProvisioningError):
    """Raised when a downloaded archive cannot be extracted."""

    pass


# ============================================================================
# Build Exceptions
# ============================================================================


class BuildError(CodecKitError):
    """
    Base exception for build orchestration errors.

    Attributes:
        stage: Name of the build stage that failed, set by the orchestrator
    """

    stage: Optional[str] = None


class PreflightError(BuildError):
    """Raised when the toolchain root or upstream source is unusable."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class ExternalToolError(BuildError):
    """Raised when an external process exits nonzero or cannot be started."""

    def __init__(self, command: Iterable[str], returncode: Optional[int]):
        self.command = list(command)
        self.returncode = returncode
        cmd = " ".join(self.command)
        if returncode is None:
            msg = f"Command not found: {cmd}"
        else:
            msg = f"Command failed with exit code {returncode}: {cmd}"
        super().__init__(msg)


class VerificationError(BuildError):
    """Raised when required output libraries are missing after install."""

    def __init__(self, missing: List[str], directory: Optional[Path] = None):
        self.missing = list(missing)
        self.directory = directory
        where = f" in {directory}" if directory else ""
        super().__init__(
            f"Missing {len(self.missing)} required "
            f"librar{'y' if len(self.missing) == 1 else 'ies'}{where}: "
            f"{', '.join(self.missing)}"
        )
