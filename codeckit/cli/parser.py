"""
codeckit CLI argument parser.

This module implements the command-line interface for codeckit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from codeckit.config.parser import DEFAULT_NDK_VERSION
from codeckit.cross.targets import DEFAULT_ARCHITECTURE

try:
    from importlib.metadata import version

    __version__ = version("codeckit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """codeckit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="codeckit",
            description="codeckit - Android NDK setup and royalty-free FFmpeg packaging",
            epilog='Use "codeckit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"codeckit {__version__}"
        )
        self._add_global_options(parser)

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_ndk_command(subparsers)
        self._add_package_command(subparsers)

        return parser

    @staticmethod
    def _add_global_options(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./codeckit.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=None,
            help="Project root directory (default: current directory)",
        )

    def _add_ndk_command(self, subparsers):
        """Add 'ndk' subcommand."""
        parser = subparsers.add_parser(
            "ndk",
            help="Download, list or verify Android NDK releases",
            description=(
                "Install an NDK release (default: %s), or use a reserved word:\n"
                "  list    List installed NDKs\n"
                "  verify  Verify the NDK named by ANDROID_NDK_HOME\n"
                "  help    Show this help" % DEFAULT_NDK_VERSION
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument(
            "target",
            nargs="?",
            default=None,
            metavar="VERSION|list|verify",
            help="NDK version (e.g. r26b) or reserved word",
        )
        parser.add_argument(
            "--install-dir",
            type=Path,
            metavar="DIR",
            help="Directory NDKs are installed under (default: ~/Android/Sdk/ndk)",
        )
        parser.add_argument(
            "--env-file",
            type=Path,
            metavar="PATH",
            help="Where to write the sourceable environment file",
        )

    def _add_package_command(self, subparsers):
        """Add 'package' subcommand."""
        parser = subparsers.add_parser(
            "package",
            help="Build and package the Safe Core FFmpeg libraries",
            description="Cross-compile royalty-free FFmpeg for one Android ABI",
        )
        parser.add_argument(
            "architecture",
            nargs="?",
            default=DEFAULT_ARCHITECTURE,
            metavar="ARCH",
            help=(
                "Target ABI: arm64-v8a, armeabi-v7a, x86_64, x86 "
                f"(default: {DEFAULT_ARCHITECTURE})"
            ),
        )
        parser.add_argument(
            "--ndk",
            type=Path,
            metavar="PATH",
            help="NDK root (default: $ANDROID_NDK_HOME)",
        )
        parser.add_argument(
            "--source",
            type=Path,
            metavar="PATH",
            help="FFmpeg source checkout (default: ./ffmpeg-<version>)",
        )
        parser.add_argument(
            "--output",
            type=Path,
            metavar="DIR",
            help="Output root (default: ./packages/safe-core)",
        )
        parser.add_argument(
            "--jobs",
            "-j",
            type=int,
            metavar="N",
            help="Parallel compile jobs (default: all cores)",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "ndk": "codeckit.cli.commands.ndk",
            "package": "codeckit.cli.commands.package",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


GLOBAL_FLAGS = ("-v", "--verbose", "-q", "--quiet")
GLOBAL_OPTIONS = ("--config", "--project-root")


def split_global_args(argv: List[str]) -> Tuple[List[str], List[str]]:
    """
    Separate global options from sub-command arguments.

    Args:
        argv: Arguments given to a shortcut script

    Returns:
        (global arguments, remaining arguments), each in original order
    """
    global_args: List[str] = []
    rest: List[str] = []

    args = iter(argv)
    for arg in args:
        if arg in GLOBAL_FLAGS:
            global_args.append(arg)
        elif arg in GLOBAL_OPTIONS:
            global_args.append(arg)
            value = next(args, None)
            if value is not None:
                global_args.append(value)
        elif arg.split("=", 1)[0] in GLOBAL_OPTIONS:
            global_args.append(arg)
        else:
            rest.append(arg)

    return global_args, rest


def _run_shortcut(command: str) -> None:
    cli = CLI()
    # Global options go before the sub-command
    global_args, rest = split_global_args(sys.argv[1:])
    sys.exit(cli.run(global_args + [command] + rest))


def setup_ndk_main():
    """Entry point for the ``setup-ndk`` script."""
    _run_shortcut("ndk")


def package_main():
    """Entry point for the ``package-safe-core`` script."""
    _run_shortcut("package")


if __name__ == "__main__":
    main()
