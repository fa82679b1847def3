"""
Android NDK provisioning and verification.
"""

from .ndk import (
    NdkProvisioner,
    ToolchainRelease,
    emit_environment_descriptor,
    read_source_properties,
)
from .verifier import ReleaseVerificationReport, verify_release

__all__ = [
    "NdkProvisioner",
    "ToolchainRelease",
    "emit_environment_descriptor",
    "read_source_properties",
    "ReleaseVerificationReport",
    "verify_release",
]
