"""
Shared utilities for CLI commands.

Provides configuration loading with command-line overrides and consistent
console output for the sub-commands.
"""

import dataclasses
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from codeckit.config.parser import CodecKitConfig, load_config

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Management
# ============================================================================

# Parsed-argument name -> CodecKitConfig field
_FLAG_OVERRIDES = {
    "install_dir": "ndk_install_dir",
    "env_file": "env_file",
    "ndk": "ndk_home",
    "source": "ffmpeg_source",
    "output": "output_dir",
    "jobs": "jobs",
}


def load_effective_config(args) -> CodecKitConfig:
    """
    Resolve configuration for a command, applying command-line flags last.

    Args:
        args: Parsed command-line arguments

    Returns:
        Effective configuration

    Raises:
        ConfigError: If the configuration file is invalid
    """
    project_root = getattr(args, "project_root", None) or Path.cwd()
    config = load_config(project_root, getattr(args, "config", None))

    overrides: Dict[str, Any] = {}
    for flag, field_name in _FLAG_OVERRIDES.items():
        value = getattr(args, flag, None)
        if value is None:
            continue
        if isinstance(value, Path):
            value = value.expanduser()
            if not value.is_absolute():
                value = (config.project_root / value).resolve()
        overrides[field_name] = value

    if "ndk_home" in overrides:
        overrides["ndk_home_selected"] = True

    if overrides:
        logger.debug(f"Command-line overrides: {overrides}")
        config = dataclasses.replace(config, **overrides)

    return config


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_box(text: str, width: int = 50, char: str = "="):
    """Print text in a box for emphasis."""
    print(char * width)
    print(text)
    print(char * width)


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for Windows console.

    Falls back to ASCII-safe markers if check marks can't be encoded.
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        safe_message = message.replace("✓", "[OK]").replace("✗", "[MISSING]")
        print(safe_message, file=file)
