"""
Host platform detection for codeckit.

The Android NDK is published for three host families. This module maps the
running system onto one of them so download URLs and prebuilt toolchain
directories can be derived.

Usage:
    from codeckit.core.platform import resolve_host_platform, prebuilt_tag

    host = resolve_host_platform()
    print(prebuilt_tag(host))  # e.g. 'linux-x86_64'
"""

import platform
from typing import Optional

from codeckit.core.exceptions import UnsupportedPlatformError

SUPPORTED_HOSTS = ("linux", "darwin", "windows")

# MSYS-style environments report names like 'MINGW64_NT-10.0'
_WINDOWS_PREFIXES = ("windows", "mingw", "msys", "cygwin")


def resolve_host_platform(system: Optional[str] = None) -> str:
    """
    Resolve the host operating system to an NDK host name.

    Args:
        system: System name to resolve (default: platform.system())

    Returns:
        One of 'linux', 'darwin', 'windows'

    Raises:
        UnsupportedPlatformError: If the system is not an NDK host

    Example:
        >>> resolve_host_platform("Linux")
        'linux'
        >>> resolve_host_platform("MINGW64_NT-10.0")
        'windows'
    """
    raw = system if system is not None else platform.system()
    name = raw.lower()

    if name.startswith("linux"):
        return "linux"
    if name.startswith("darwin"):
        return "darwin"
    if name.startswith(_WINDOWS_PREFIXES):
        return "windows"

    raise UnsupportedPlatformError(raw or "unknown")


def prebuilt_tag(host: str) -> str:
    """
    Get the NDK prebuilt directory name for a host.

    NDK releases ship x86_64 host binaries only (Apple silicon runs them
    under Rosetta), so the architecture part is fixed.

    Args:
        host: Host name from resolve_host_platform()

    Returns:
        Prebuilt directory name, e.g. 'darwin-x86_64'
    """
    if host not in SUPPORTED_HOSTS:
        raise UnsupportedPlatformError(host)
    return f"{host}-x86_64"


def executable_name(name: str, host: str) -> str:
    """Append the host executable suffix to a tool name."""
    return f"{name}.exe" if host == "windows" else name
