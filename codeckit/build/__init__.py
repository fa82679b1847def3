"""
Build configuration, manifest and packaging for codeckit.

The orchestrator lives in ``codeckit.build.orchestrator`` and is imported
from there directly.
"""

from .features import SAFE_CORE, FeatureSet
from .manifest import MANIFEST_FILENAME, REQUIRED_LIBRARIES, BuildManifest
from .packaging import archive_name, package_artifacts

__all__ = [
    "SAFE_CORE",
    "FeatureSet",
    "MANIFEST_FILENAME",
    "REQUIRED_LIBRARIES",
    "BuildManifest",
    "archive_name",
    "package_artifacts",
]
