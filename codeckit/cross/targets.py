"""
Android cross-compilation targets.

One frozen ArchitectureProfile exists per supported ABI. Name resolution is
pure: an unknown name is rejected before anything touches the file system
or network, so a bad argument never starts a partial build.
"""

from dataclasses import dataclass
from typing import Dict, List

from codeckit.core.exceptions import UnsupportedArchitectureError

MIN_ANDROID_API = 24


@dataclass(frozen=True)
class ArchitectureProfile:
    """
    Cross-compilation settings for one Android ABI.

    Attributes:
        name: Canonical ABI name (e.g. 'arm64-v8a')
        arch: FFmpeg --arch value (CPU family)
        cpu: FFmpeg --cpu value
        cross_prefix: Compiler triple without the API suffix
        api_level: Minimum Android API level
        abi_dir: Output directory name
        extra_cflags: Instruction-set flags for this ABI
    """

    name: str
    arch: str
    cpu: str
    cross_prefix: str
    api_level: int
    abi_dir: str
    extra_cflags: str = ""

    @property
    def target_prefix(self) -> str:
        """Prefix of the API-suffixed NDK tool names, e.g. 'x86_64-linux-android24-'."""
        return f"{self.cross_prefix}{self.api_level}-"

    @property
    def cc(self) -> str:
        return f"{self.cross_prefix}{self.api_level}-clang"

    @property
    def cxx(self) -> str:
        return f"{self.cross_prefix}{self.api_level}-clang++"

    @property
    def strip_name(self) -> str:
        """Strip tool name the FFmpeg build expects for this target."""
        return f"{self.cross_prefix}{self.api_level}-strip"


PROFILES: Dict[str, ArchitectureProfile] = {
    "arm64-v8a": ArchitectureProfile(
        name="arm64-v8a",
        arch="aarch64",
        cpu="armv8-a",
        cross_prefix="aarch64-linux-android",
        api_level=MIN_ANDROID_API,
        abi_dir="arm64-v8a",
    ),
    "armeabi-v7a": ArchitectureProfile(
        name="armeabi-v7a",
        arch="arm",
        cpu="armv7-a",
        cross_prefix="armv7a-linux-androideabi",
        api_level=MIN_ANDROID_API,
        abi_dir="armeabi-v7a",
        extra_cflags="-mfpu=neon -mfloat-abi=softfp",
    ),
    "x86_64": ArchitectureProfile(
        name="x86_64",
        arch="x86_64",
        cpu="x86-64",
        cross_prefix="x86_64-linux-android",
        api_level=MIN_ANDROID_API,
        abi_dir="x86_64",
    ),
    "x86": ArchitectureProfile(
        name="x86",
        arch="i686",
        cpu="i686",
        cross_prefix="i686-linux-android",
        api_level=MIN_ANDROID_API,
        abi_dir="x86",
    ),
}

ALIASES: Dict[str, str] = {
    "arm64": "arm64-v8a",
    "aarch64": "arm64-v8a",
    "arm": "armeabi-v7a",
    "arm32": "armeabi-v7a",
    "armv7": "armeabi-v7a",
    "x64": "x86_64",
    "i686": "x86",
}

DEFAULT_ARCHITECTURE = "arm64-v8a"


def supported_architectures() -> List[str]:
    """Canonical ABI names, in table order."""
    return list(PROFILES)


def configure_architecture(name: str) -> ArchitectureProfile:
    """
    Resolve an architecture name or alias to its profile.

    Args:
        name: ABI name or alias, case-insensitive

    Returns:
        The matching ArchitectureProfile

    Raises:
        UnsupportedArchitectureError: If the name is not known

    Example:
        >>> configure_architecture("ARM64").abi_dir
        'arm64-v8a'
    """
    key = (name or "").strip().lower()
    key = ALIASES.get(key, key)

    profile = PROFILES.get(key)
    if profile is None:
        raise UnsupportedArchitectureError(name, supported_architectures())
    return profile
