"""
Package command implementation.

Cross-compiles the Safe Core FFmpeg libraries for one Android ABI, writes
metadata.json beside them and zips the result.
"""

import logging

from codeckit.build.features import SAFE_CORE
from codeckit.build.orchestrator import BuildOrchestrator
from codeckit.cli.utils import load_effective_config, print_box, print_error
from codeckit.core.exceptions import CodecKitError, PreflightError
from codeckit.core.locking import LockTimeout

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the package command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    logger.debug(f"Arguments: {args}")

    try:
        config = load_effective_config(args)

        print_box(f"{SAFE_CORE.label} codec builder & packager")
        print(f"Target: {args.architecture}")
        print(f"FFmpeg: {config.ffmpeg_version}")
        print(f"Output: {config.output_dir}")
        print()

        result = BuildOrchestrator(config).run(args.architecture)

    except PreflightError as e:
        print_error(str(e), details="Set ANDROID_NDK_HOME or pass --ndk/--source")
        return 1
    except CodecKitError as e:
        print_error(str(e))
        return 1
    except LockTimeout as e:
        print_error(f"Another build for this architecture is running ({e})")
        return 1

    print()
    print_box("BUILD COMPLETE")
    print()
    print(f"Output directory: {result.lib_dir}")
    print(f"Archive: {result.archive}")
    print()
    return 0
