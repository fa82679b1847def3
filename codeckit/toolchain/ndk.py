"""
Android NDK provisioning.

This module installs NDK releases under a fixed install root and reuses
them across builds:

1. Resolve the host platform
2. Return an already-installed release unchanged (no network access)
3. Download the release archive (requests, then curl)
4. Extract it and rename ``android-ndk-<version>`` to ``<version>``
5. Delete the downloaded archive

Example:
    >>> provisioner = NdkProvisioner(Path.home() / "Android/Sdk/ndk")
    >>> path = provisioner.ensure_release("r26b")
    >>> for name, revision in provisioner.list_installed():
    ...     print(name, revision)
"""

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterator, Optional, Tuple

from codeckit.core.download import DownloadProgress, fetch
from codeckit.core.exceptions import ExtractionError
from codeckit.core.filesystem import atomic_write, extract_archive, make_executable
from codeckit.core.locking import LockManager
from codeckit.core.platform import executable_name, prebuilt_tag, resolve_host_platform

logger = logging.getLogger(__name__)

DOWNLOAD_BASE_URL = "https://dl.google.com/android/repository"
PROPERTIES_FILE = "source.properties"
UNKNOWN_REVISION = "unknown"

# Relative to toolchains/llvm/prebuilt/<host>-x86_64/bin
EXPECTED_TOOLS = ("clang", "clang++", "llvm-ar")

TEMPLATE_DIR = Path(__file__).parent / "templates"
ENV_TEMPLATE = "ndk_env.sh.j2"

# Backslash first so later escapes are not doubled
DOUBLE_QUOTE_SPECIALS = ("\\", '"', "$", "`")


@dataclass(frozen=True)
class ToolchainRelease:
    """An NDK release for one host, located under an install root."""

    version: str
    host: str
    install_root: Path

    @property
    def url(self) -> str:
        return f"{DOWNLOAD_BASE_URL}/android-ndk-{self.version}-{self.host}.zip"

    @property
    def path(self) -> Path:
        """Normalized install location."""
        return self.install_root / self.version

    @property
    def legacy_path(self) -> Path:
        """Location an archive extracts to before renaming."""
        return self.install_root / f"android-ndk-{self.version}"

    @property
    def expected_binaries(self) -> Tuple[str, ...]:
        return expected_binaries(self.host)

    def installed_path(self) -> Optional[Path]:
        """Existing install directory, or None if not installed."""
        for candidate in (self.path, self.legacy_path):
            if candidate.is_dir():
                return candidate
        return None


def expected_binaries(host: str) -> Tuple[str, ...]:
    """Binaries every usable NDK must provide, relative to its root."""
    bin_dir = f"toolchains/llvm/prebuilt/{prebuilt_tag(host)}/bin"
    return tuple(f"{bin_dir}/{executable_name(tool, host)}" for tool in EXPECTED_TOOLS)


def read_source_properties(path: Path) -> Dict[str, str]:
    """
    Parse an NDK ``source.properties`` file.

    Args:
        path: Path to the properties file

    Returns:
        Mapping of property names to values (empty if unreadable)
    """
    properties: Dict[str, str] = {}
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"Cannot read {path}: {e}")
        return properties

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        properties[key.strip()] = value.strip()

    return properties


def read_revision(ndk_path: Path) -> str:
    """Declared ``Pkg.Revision`` of an NDK directory, or 'unknown'."""
    revision = read_source_properties(ndk_path / PROPERTIES_FILE).get("Pkg.Revision")
    return revision or UNKNOWN_REVISION


class NdkProvisioner:
    """
    Installs and enumerates NDK releases under one install root.

    Attributes:
        install_root: Directory holding one subdirectory per release
        host: NDK host name ('linux', 'darwin', 'windows')
    """

    def __init__(
        self,
        install_root: Path,
        host: Optional[str] = None,
        lock_manager: Optional[LockManager] = None,
    ):
        """
        Initialize provisioner.

        Args:
            install_root: Directory releases are installed under
            host: Host platform (default: detected)
            lock_manager: Lock manager (default: locks in install_root)

        Raises:
            UnsupportedPlatformError: If host detection fails
        """
        self.install_root = Path(install_root)
        self.host = host or resolve_host_platform()
        self.lock_manager = lock_manager or LockManager(self.install_root)

    def release(self, version: str) -> ToolchainRelease:
        return ToolchainRelease(version, self.host, self.install_root)

    def ensure_release(
        self,
        version: str,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ) -> Path:
        """
        Install an NDK release unless it is already present.

        Args:
            version: NDK version string (e.g. 'r26b')
            progress_callback: Optional download progress callback

        Returns:
            Path to the installed release

        Raises:
            DownloadError: If both download transports fail
            ExtractionError: If the archive cannot be extracted
        """
        release = self.release(version)

        existing = release.installed_path()
        if existing is not None:
            logger.info(f"NDK {version} already installed at {existing}")
            return existing

        with self.lock_manager.release_lock(version):
            # Another process may have finished while we waited
            existing = release.installed_path()
            if existing is not None:
                logger.info(f"NDK {version} installed by another process")
                return existing

            return self._install(release, progress_callback)

    def _install(
        self,
        release: ToolchainRelease,
        progress_callback: Optional[Callable[[DownloadProgress], None]],
    ) -> Path:
        logger.info(f"Downloading Android NDK {release.version}...")
        logger.info(f"URL: {release.url}")

        self.install_root.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(prefix="codeckit-ndk-") as tmp:
            archive = Path(tmp) / f"android-ndk-{release.version}.zip"
            try:
                fetch(release.url, archive, progress_callback=progress_callback)

                logger.info("Extracting NDK...")
                extract_archive(archive, self.install_root)
            finally:
                archive.unlink(missing_ok=True)

        if release.legacy_path.is_dir() and not release.path.exists():
            release.legacy_path.rename(release.path)

        installed = release.installed_path()
        if installed is None:
            # Archive did not contain android-ndk-<version>/
            raise ExtractionError(
                f"Archive for NDK {release.version} did not contain "
                f"{release.legacy_path.name}/"
            )

        logger.info(f"NDK {release.version} installed to {installed}")
        return installed

    def list_installed(self) -> Iterator[Tuple[str, str]]:
        """
        Enumerate installed releases.

        Yields:
            (directory name, declared revision) pairs, sorted by name
        """
        if not self.install_root.is_dir():
            return

        for entry in sorted(self.install_root.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                yield entry.name, read_revision(entry)


def shell_escape(value) -> str:
    """Escape a value for use inside a double-quoted shell string."""
    text = str(value)
    for char in DOUBLE_QUOTE_SPECIALS:
        text = text.replace(char, f"\\{char}")
    return text


def _template_environment():
    from jinja2 import Environment, FileSystemLoader

    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["shell_escape"] = shell_escape
    return env


def emit_environment_descriptor(ndk_path: Path, env_file: Path) -> Path:
    """
    Write a sourceable shell snippet exporting the toolchain root.

    Args:
        ndk_path: Installed NDK root
        env_file: Destination file

    Returns:
        Path to the written file
    """
    template = _template_environment().get_template(ENV_TEMPLATE)
    content = template.render(ndk_path=ndk_path)
    atomic_write(env_file, content)
    make_executable(env_file)
    logger.debug(f"Wrote environment descriptor: {env_file}")
    return env_file
