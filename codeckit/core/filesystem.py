"""
File system utilities for codeckit.

This module provides:
- Safe ZIP extraction (directory traversal is rejected)
- Atomic writes (temp file + rename)
- Tool aliases (symlink, with a copy fallback where symlinks are unavailable)
"""

import logging
import os
import shutil
import stat
import tempfile
import zipfile
from pathlib import Path
from typing import Union

from codeckit.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent.

    Args:
        path: Path to check
        parent: Potential parent path

    Returns:
        True if path is under parent
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(member: str, destination: Path) -> None:
    member_path = (destination / member).resolve()
    if not is_relative_to(member_path, destination.resolve()):
        raise ExtractionError(
            f"Archive member '{member}' attempts directory traversal. "
            "Extraction has been blocked."
        )


def _extract_symlink(
    zf: zipfile.ZipFile, info: zipfile.ZipInfo, destination: Path
) -> Path:
    """Recreate a symlink member; its target must stay inside destination."""
    link_path = destination / info.filename.rstrip("/")
    target = zf.read(info).decode("utf-8")

    resolved = (link_path.parent / target).resolve()
    if not is_relative_to(resolved, destination.resolve()):
        raise ExtractionError(
            f"Archive symlink '{info.filename}' points outside the destination "
            f"({target}). Extraction has been blocked."
        )

    link_path.parent.mkdir(parents=True, exist_ok=True)
    if link_path.is_symlink() or link_path.exists():
        link_path.unlink()
    os.symlink(target, link_path)
    return link_path


def extract_archive(archive_path: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Extract a ZIP archive to a destination directory.

    Unix permission bits stored in the archive are restored, since NDK
    binaries must stay executable. Symlink members (``clang -> clang-17``)
    are recreated as symlinks.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Raises:
        ExtractionError: If the archive is missing, corrupt, or unsafe

    Example:
        >>> extract_archive('android-ndk-r26b-linux.zip', '/opt/ndk')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ExtractionError(f"Archive not found: {archive_path}")

    if not archive_path.name.lower().endswith(".zip"):
        raise ExtractionError(
            f"Unsupported archive format: {archive_path.suffix}. Supported: .zip"
        )

    destination.mkdir(parents=True, exist_ok=True)

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            members = zf.infolist()
            for info in members:
                _validate_archive_path(info.filename, destination)

            for info in members:
                attrs = info.external_attr >> 16
                if stat.S_ISLNK(attrs):
                    _extract_symlink(zf, info, destination)
                    continue

                extracted = Path(zf.extract(info, destination))
                mode = attrs & 0o777
                if mode and not info.is_dir():
                    os.chmod(extracted, mode)
    except ExtractionError:
        raise
    except (zipfile.BadZipFile, OSError) as e:
        raise ExtractionError(f"Failed to extract {archive_path}: {e}") from e

    logger.debug(f"Extracted {len(members)} entries into {destination}")


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    The file is never observed in a partially-written state.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)
    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def make_executable(path: Path) -> None:
    """Add execute permission for user, group and other."""
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def create_alias(alias: Path, target: Path) -> bool:
    """
    Make ``alias`` resolve to ``target``.

    A symlink is preferred. When the file system refuses symlinks (Windows
    without developer mode, some network mounts) the target is copied.

    Args:
        alias: Path of the alias to create
        target: Existing file the alias should point at

    Returns:
        True if the alias was created, False if something already existed

    Raises:
        FileNotFoundError: If target does not exist
    """
    if alias.exists() or alias.is_symlink():
        logger.debug(f"Alias already present: {alias}")
        return False

    if not target.exists():
        raise FileNotFoundError(f"Alias target not found: {target}")

    try:
        alias.symlink_to(target)
        logger.debug(f"Created symlink {alias} -> {target}")
    except FileExistsError:
        # Lost a race with a concurrent build
        return False
    except OSError as e:
        logger.debug(f"Symlink failed ({e}), copying {target} to {alias}")
        shutil.copy2(target, alias)

    return True
