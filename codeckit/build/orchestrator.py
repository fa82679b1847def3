"""
Per-architecture codec build orchestration.

A run walks a fixed sequence of stages::

    PREFLIGHT -> CLEAN -> PATCH -> CONFIGURE -> COMPILE -> INSTALL
              -> VERIFY -> MANIFEST -> PACKAGE -> DONE

The first failing stage ends the run: the state becomes FAILED with the
stage and cause recorded, the exception's ``stage`` attribute is set, and
the exception propagates. Nothing is retried or rolled back.

Builds for different ABIs may run concurrently (distinct output
directories). Builds for the same ABI share the source tree and output
directory and are serialised by an advisory lock.

Example:
    >>> orchestrator = BuildOrchestrator(load_config(Path.cwd()))
    >>> result = orchestrator.run("arm64-v8a")
    >>> print(result.archive)
"""

import logging
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from codeckit.backends.ffmpeg import FFmpegBackend
from codeckit.build.features import SAFE_CORE, FeatureSet
from codeckit.build.manifest import MANIFEST_FILENAME, REQUIRED_LIBRARIES, BuildManifest
from codeckit.build.packaging import archive_name, package_artifacts
from codeckit.config.parser import CodecKitConfig
from codeckit.core.exceptions import BuildError, PreflightError, VerificationError
from codeckit.core.locking import LockManager
from codeckit.core.platform import resolve_host_platform
from codeckit.core.process import CommandRunner
from codeckit.cross.targets import ArchitectureProfile, configure_architecture

logger = logging.getLogger(__name__)


class BuildStage(Enum):
    """Orchestrator states, in execution order."""

    PREFLIGHT = "preflight"
    CLEAN = "clean"
    PATCH = "patch"
    CONFIGURE = "configure"
    COMPILE = "compile"
    INSTALL = "install"
    VERIFY = "verify"
    MANIFEST = "manifest"
    PACKAGE = "package"
    DONE = "done"
    FAILED = "failed"


@dataclass
class BuildState:
    """Current state of a run; ``failed_stage``/``cause`` set on failure."""

    stage: BuildStage = BuildStage.PREFLIGHT
    failed_stage: Optional[BuildStage] = None
    cause: Optional[BaseException] = None


@dataclass
class BuildResult:
    """Outputs of a successful run."""

    abi: str
    lib_dir: Path
    manifest_path: Path
    archive: Path
    configure_args: List[str] = field(default_factory=list)
    libraries: List[str] = field(default_factory=list)


def verify_build(lib_dir: Path) -> List[str]:
    """
    Check the install tree for every required library.

    Every library is checked before failing so the report names all
    missing files at once.

    Args:
        lib_dir: Installed library directory

    Returns:
        Names of the required libraries (all present)

    Raises:
        VerificationError: Listing every missing library
    """
    logger.info(f"Checking required libraries in: {lib_dir}")

    missing = []
    for name in REQUIRED_LIBRARIES:
        path = lib_dir / name
        if path.is_file():
            size_kb = path.stat().st_size / 1024
            logger.info(f"  ✓ {name} ({size_kb:.0f} KB)")
        else:
            logger.error(f"  ✗ {name} - MISSING!")
            missing.append(name)

    if missing:
        raise VerificationError(missing, lib_dir)

    return list(REQUIRED_LIBRARIES)


def reset_output_dir(prefix: Path) -> None:
    """Replace the per-ABI output directory with an empty one."""
    if prefix.exists():
        logger.info(f"Removing previous output: {prefix}")
        shutil.rmtree(prefix)
    prefix.mkdir(parents=True)


class BuildOrchestrator:
    """
    Drives one FFmpeg build per invocation of run().

    Attributes:
        config: Resolved settings (toolchain root, source, output root)
        features: Component allow-list
        state: State of the most recent run
    """

    def __init__(
        self,
        config: CodecKitConfig,
        runner: Optional[CommandRunner] = None,
        features: FeatureSet = SAFE_CORE,
        host: Optional[str] = None,
        lock_timeout: float = 5,
    ):
        self.config = config
        self.runner = runner
        self.features = features
        self.host = host
        self.lock_timeout = lock_timeout
        self.state = BuildState()

    def _enter(self, stage: BuildStage) -> None:
        self.state.stage = stage
        logger.debug(f"Stage: {stage.value}")

    def _fail(self, error: BaseException) -> None:
        failed = self.state.stage
        self.state = BuildState(
            stage=BuildStage.FAILED, failed_stage=failed, cause=error
        )
        if isinstance(error, BuildError):
            error.stage = failed.value
        logger.error(f"Build failed during {failed.value}: {error}")

    def output_dir(self, profile: ArchitectureProfile) -> Path:
        return self.config.output_dir / profile.abi_dir

    def preflight(self) -> None:
        """
        Validate inputs without touching any state.

        Raises:
            PreflightError: If the toolchain root or source is not a directory
        """
        ndk_home = self.config.ndk_home
        if not ndk_home.is_dir():
            raise PreflightError(
                f"Android NDK not found at: {ndk_home} "
                "(set ANDROID_NDK_HOME or pass --ndk)",
                ndk_home,
            )

        source = self.config.ffmpeg_source
        if not source.is_dir():
            raise PreflightError(f"FFmpeg source not found at: {source}", source)

        logger.info(f"NDK: {ndk_home}")
        logger.info(f"FFmpeg source: {source}")

    def run(self, architecture: str) -> BuildResult:
        """
        Build, verify, describe and package one architecture.

        Args:
            architecture: ABI name or alias

        Returns:
            BuildResult describing the outputs

        Raises:
            UnsupportedArchitectureError: Before any other action
            PreflightError: Missing toolchain or source
            ExternalToolError: clean/configure/make/install failed
            VerificationError: Required libraries missing
            LockTimeout: Another build of the same ABI is running
        """
        self.state = BuildState()
        locks = LockManager(self.config.output_dir)

        try:
            # Resolved before anything else so a bad name has no side effects
            profile = configure_architecture(architecture)
            self.preflight()
            with locks.abi_lock(profile.abi_dir, timeout=self.lock_timeout):
                return self._run_locked(profile)
        except Exception as e:
            self._fail(e)
            raise

    def _run_locked(self, profile: ArchitectureProfile) -> BuildResult:
        prefix = self.output_dir(profile)
        lib_dir = prefix / "lib"
        archive = self.config.output_dir / archive_name(profile.abi_dir)

        backend = FFmpegBackend(
            source_dir=self.config.ffmpeg_source,
            ndk_home=self.config.ndk_home,
            host=self.host or resolve_host_platform(),
            runner=self.runner,
            jobs=self.config.jobs,
        )

        logger.info(
            f"Building {self.features.label} FFmpeg {self.config.ffmpeg_version} "
            f"for {profile.abi_dir}"
        )

        self._enter(BuildStage.CLEAN)
        # Nothing from an earlier build may end up in this package
        reset_output_dir(prefix)
        archive.unlink(missing_ok=True)
        backend.clean()

        self._enter(BuildStage.PATCH)
        backend.ensure_strip_alias(profile)
        backend.apply_library_naming()

        self._enter(BuildStage.CONFIGURE)
        configure_args = backend.configure(profile, prefix, self.features)

        self._enter(BuildStage.COMPILE)
        backend.build()

        self._enter(BuildStage.INSTALL)
        backend.install()

        self._enter(BuildStage.VERIFY)
        libraries = verify_build(lib_dir)

        self._enter(BuildStage.MANIFEST)
        manifest = BuildManifest.for_profile(
            profile, self.config.ffmpeg_version, self.features
        )
        manifest_path = manifest.write(lib_dir / MANIFEST_FILENAME)

        self._enter(BuildStage.PACKAGE)
        package_artifacts(lib_dir, archive)

        self._enter(BuildStage.DONE)
        logger.info(f"Build complete: {lib_dir}")

        return BuildResult(
            abi=profile.abi_dir,
            lib_dir=lib_dir,
            manifest_path=manifest_path,
            archive=archive,
            configure_args=configure_args,
            libraries=libraries,
        )
