"""
NDK installation verification.

Checks that an NDK directory provides the compiler and archiver binaries a
cross build needs. Missing binaries are reported as warnings rather than
errors: a partial NDK layout may still support a narrower build.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from codeckit.core.platform import resolve_host_platform
from codeckit.toolchain.ndk import expected_binaries, read_revision

logger = logging.getLogger(__name__)


@dataclass
class ReleaseVerificationReport:
    """Result of NDK verification."""

    path: Path
    host: str
    present: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    revision: str = "unknown"

    @property
    def ok(self) -> bool:
        return not self.missing

    def summary(self) -> str:
        total = len(self.present) + len(self.missing)
        if self.ok:
            return f"All {total} expected binaries present"
        return f"{len(self.missing)} of {total} expected binaries missing"


def verify_release(ndk_path: Path, host: Optional[str] = None) -> ReleaseVerificationReport:
    """
    Check an NDK directory for its expected binaries.

    Args:
        ndk_path: NDK root directory
        host: Host platform (default: detected)

    Returns:
        Report listing present and missing binaries

    Example:
        >>> report = verify_release(Path('~/Android/Sdk/ndk/r26b').expanduser())
        >>> if not report.ok:
        ...     print(report.missing)
    """
    host = host or resolve_host_platform()
    ndk_path = Path(ndk_path)

    logger.info(f"Verifying NDK installation at {ndk_path}")

    report = ReleaseVerificationReport(path=ndk_path, host=host)
    for rel in expected_binaries(host):
        if (ndk_path / rel).is_file():
            report.present.append(rel)
        else:
            logger.warning(f"Expected file not found: {rel}")
            report.missing.append(rel)

    report.revision = read_revision(ndk_path)

    logger.info(f"NDK verification complete: {report.summary()}")
    return report
