"""
FFmpeg configure/make backend.

Drives FFmpeg's own autoconf-style ``configure`` script and ``make`` with an
NDK clang toolchain. Two adjustments are made before configuring:

- FFmpeg installs versioned shared objects (``libavcodec.so.61`` plus
  symlinks). The Android loader expects bare ``libNAME.so`` files, so the
  naming variables in ``configure`` are rewritten from a declarative table.
- ``make install`` strips with ``<triple><api>-strip``, which recent NDKs do
  not ship; an alias to ``llvm-strip`` is created in the toolchain.
"""

import logging
import os
import re
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Tuple

from codeckit.backends.base import BuildBackend
from codeckit.build.features import FeatureSet
from codeckit.core.filesystem import atomic_write, create_alias
from codeckit.core.platform import executable_name, prebuilt_tag
from codeckit.core.process import CommandRunner, default_jobs, run_command
from codeckit.cross.targets import ArchitectureProfile

logger = logging.getLogger(__name__)

# Assignments in ./configure forced to these values (variable, value)
LIBRARY_NAMING_OVERRIDES: Tuple[Tuple[str, str], ...] = (
    ("SLIB_INSTALL_NAME", "'$(SLIBNAME)'"),
    ("SLIB_INSTALL_LINKS", ""),
)

# Embedded soname rewrites (pattern, replacement)
SONAME_REWRITES: Tuple[Tuple[str, str], ...] = (
    (r"-Wl,-soname,\$\$\(@F\)", "-Wl,-soname,$(SLIBNAME)"),
)


def toolchain_bin_dir(ndk_home: Path, host: str) -> Path:
    """Directory holding the NDK's clang and binutils replacements."""
    return ndk_home / "toolchains" / "llvm" / "prebuilt" / prebuilt_tag(host) / "bin"


def rewrite_library_naming(script: str) -> str:
    """
    Apply the shared-library naming overrides to configure script text.

    The rewrite is a fixed point: applying it to its own output returns
    the same text.
    """
    for variable, value in LIBRARY_NAMING_OVERRIDES:
        pattern = re.compile(rf"^([ \t]*){re.escape(variable)}=.*$", re.MULTILINE)
        script = pattern.sub(
            lambda m, v=variable, val=value: f"{m.group(1)}{v}={val}", script
        )

    for pattern, replacement in SONAME_REWRITES:
        script = re.sub(pattern, lambda m, r=replacement: r, script)

    return script


class FFmpegBackend(BuildBackend):
    """
    Build an FFmpeg source checkout for Android.

    Attributes:
        source_dir: FFmpeg source checkout (builds in-tree)
        ndk_home: NDK root
        host: NDK host name
        jobs: Parallel make jobs
    """

    def __init__(
        self,
        source_dir: Path,
        ndk_home: Path,
        host: str,
        runner: Optional[CommandRunner] = None,
        jobs: Optional[int] = None,
        base_env: Optional[Mapping[str, str]] = None,
    ):
        self.source_dir = Path(source_dir)
        self.ndk_home = Path(ndk_home)
        self.host = host
        self.runner: Callable = runner or run_command
        self.jobs = jobs or default_jobs()
        self._base_env = dict(os.environ if base_env is None else base_env)

    @property
    def toolchain_bin(self) -> Path:
        return toolchain_bin_dir(self.ndk_home, self.host)

    def environment(self) -> dict:
        """Process environment with the NDK toolchain first on PATH."""
        env = dict(self._base_env)
        path = env.get("PATH", "")
        env["PATH"] = (
            f"{self.toolchain_bin}{os.pathsep}{path}" if path else str(self.toolchain_bin)
        )
        env["ANDROID_NDK_HOME"] = str(self.ndk_home)
        return env

    def _run(self, argv: List[str]) -> None:
        self.runner(argv, self.source_dir, self.environment())

    # ------------------------------------------------------------------
    # Source and toolchain preparation
    # ------------------------------------------------------------------

    def apply_library_naming(self) -> bool:
        """
        Rewrite ./configure so install produces unversioned ``.so`` files.

        Returns:
            True if the script changed, False if it was already patched
        """
        script_path = self.source_dir / "configure"
        original = script_path.read_text(encoding="utf-8")
        patched = rewrite_library_naming(original)

        if patched == original:
            logger.debug("configure already uses unversioned library names")
            return False

        mode = script_path.stat().st_mode
        atomic_write(script_path, patched)
        script_path.chmod(mode)
        logger.info("Patched configure for unversioned shared library names")
        return True

    def ensure_strip_alias(self, profile: ArchitectureProfile) -> bool:
        """
        Alias the API-suffixed strip name to llvm-strip.

        Returns:
            True if an alias was created
        """
        bin_dir = self.toolchain_bin
        target = bin_dir / executable_name("llvm-strip", self.host)
        alias = bin_dir / executable_name(profile.strip_name, self.host)

        if alias.exists() or alias.is_symlink():
            return False
        if not target.exists():
            logger.warning(f"llvm-strip not found at {target}; install may not strip")
            return False

        created = create_alias(alias, target)
        if created:
            logger.info(f"Created {alias.name} -> {target.name}")
        return created

    # ------------------------------------------------------------------
    # External steps
    # ------------------------------------------------------------------

    def configure_args(
        self, profile: ArchitectureProfile, prefix: Path, features: FeatureSet
    ) -> List[str]:
        """Full configure command line for a target."""
        cflags = f"{features.optimization_cflags} {profile.extra_cflags}".strip()
        return [
            "./configure",
            f"--prefix={prefix}",
            "--enable-cross-compile",
            f"--cross-prefix={profile.target_prefix}",
            "--target-os=android",
            f"--arch={profile.arch}",
            f"--cpu={profile.cpu}",
            f"--cc={profile.cc}",
            f"--cxx={profile.cxx}",
            *features.configure_flags(),
            f"--extra-cflags={cflags}",
            f"--extra-ldflags={features.ldflags}",
        ]

    def clean(self) -> bool:
        if not (self.source_dir / "ffbuild" / "config.mak").exists():
            logger.debug("No previous build state, nothing to clean")
            return False

        logger.info("Cleaning previous build...")
        self._run(["make", "clean"])
        self._run(["make", "distclean"])
        return True

    def configure(
        self, profile: ArchitectureProfile, prefix: Path, features: FeatureSet
    ) -> List[str]:
        argv = self.configure_args(profile, prefix, features)
        logger.info(f"Configuring FFmpeg for {profile.abi_dir}...")
        self._run(argv)
        return argv

    def build(self) -> None:
        logger.info(f"Building FFmpeg with {self.jobs} jobs (this may take a few minutes)...")
        self._run(["make", f"-j{self.jobs}"])

    def install(self) -> None:
        logger.info("Installing...")
        self._run(["make", "install"])
