"""
codeckit CLI module.

This module provides the command-line interface for codeckit.
"""

from .parser import CLI, main, package_main, setup_ndk_main
from . import utils

__all__ = ["CLI", "main", "package_main", "setup_ndk_main", "utils"]
