"""
Build backends for codeckit.
"""

from .base import BuildBackend
from .ffmpeg import FFmpegBackend, rewrite_library_naming, toolchain_bin_dir

__all__ = [
    "BuildBackend",
    "FFmpegBackend",
    "rewrite_library_naming",
    "toolchain_bin_dir",
]
