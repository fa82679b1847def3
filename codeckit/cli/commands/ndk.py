"""
NDK command implementation.

Installs an Android NDK release, lists installed releases, or verifies the
release selected by ANDROID_NDK_HOME or ``ndk.home``.
"""

import logging
from pathlib import Path

from codeckit.cli.utils import load_effective_config, print_box, print_error
from codeckit.config.parser import CONFIG_FILENAME, NDK_HOME_ENV, CodecKitConfig
from codeckit.core.download import DownloadProgress
from codeckit.core.exceptions import CodecKitError
from codeckit.core.locking import LockTimeout
from codeckit.toolchain.ndk import (
    NdkProvisioner,
    emit_environment_descriptor,
    shell_escape,
)
from codeckit.toolchain.verifier import verify_release

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the ndk command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    logger.debug(f"Arguments: {args}")

    if args.target == "help":
        print(_usage())
        return 0

    try:
        config = load_effective_config(args)
        provisioner = NdkProvisioner(config.ndk_install_dir)

        if args.target == "list":
            print_installed(provisioner)
            return 0

        if args.target == "verify":
            return _verify_selected(provisioner, config)

        version = args.target or config.ndk_version
        ndk_path = provisioner.ensure_release(version, progress_callback=_log_progress)

        report = verify_release(ndk_path, provisioner.host)
        _print_report(report)

        env_file = emit_environment_descriptor(ndk_path, config.env_file)
        _print_instructions(ndk_path, env_file)
        return 0

    except CodecKitError as e:
        print_error(str(e))
        return 1
    except LockTimeout as e:
        print_error(f"Another process is installing this NDK release ({e})")
        return 1


def print_installed(provisioner: NdkProvisioner) -> None:
    """Print installed releases with their declared revision."""
    print("Installed NDKs:")
    print()

    found = False
    for name, revision in provisioner.list_installed():
        print(f"  - {name} (revision: {revision})")
        found = True

    if not found:
        print(f"  No NDKs installed in {provisioner.install_root}")
    print()


def _verify_selected(provisioner: NdkProvisioner, config: CodecKitConfig) -> int:
    if not config.ndk_home_selected:
        print_installed(provisioner)
        print_error(f"{NDK_HOME_ENV} not set and no ndk.home in {CONFIG_FILENAME}")
        return 1

    if not config.ndk_home.is_dir():
        print_error(f"Selected NDK not found: {config.ndk_home}")
        return 1

    report = verify_release(config.ndk_home, provisioner.host)
    _print_report(report)
    return 0


def _print_report(report) -> None:
    for rel in report.missing:
        print(f"Warning: Expected file not found: {rel}")
    print(f"NDK revision: {report.revision}")
    print(f"NDK verification complete: {report.summary()}")
    print()


def _print_instructions(ndk_path: Path, env_file: Path) -> None:
    print_box("NDK Setup Complete")
    print()
    print(f"NDK installed at: {ndk_path}")
    print()
    print("To use this NDK, add the following to your shell profile:")
    print()
    print(f'  export ANDROID_NDK_HOME="{shell_escape(ndk_path)}"')
    print('  export ANDROID_NDK="$ANDROID_NDK_HOME"')
    print('  export PATH="$ANDROID_NDK_HOME:$PATH"')
    print()
    print("You can also source the environment directly:")
    print(f"  source {env_file}")
    print()


def _log_progress(progress: DownloadProgress) -> None:
    logger.debug(f"Downloaded {progress}")


def _usage() -> str:
    return "\n".join(
        [
            "Usage: codeckit ndk [VERSION|list|verify|help]",
            "",
            "  VERSION   Install the given NDK release (e.g. r26b)",
            "  list      List installed NDKs",
            f"  verify    Verify the NDK named by {NDK_HOME_ENV}",
            "  help      Show this help",
        ]
    )
