"""
Configuration loading for codeckit.
"""

from .parser import (
    CONFIG_FILENAME,
    CodecKitConfig,
    load_config,
    parse_config,
)

__all__ = ["CONFIG_FILENAME", "CodecKitConfig", "load_config", "parse_config"]
