"""
Concurrent access control for codeckit.

Provisioning the same NDK release, or building the same ABI, from two
processes at once would corrupt the install or output tree. These advisory
file locks serialise such runs. Builds for different ABIs use different
lock files and never contend.

Usage:
    from codeckit.core.locking import LockManager

    lock_manager = LockManager(output_root)
    with lock_manager.abi_lock("arm64-v8a"):
        ...  # clean, configure, build, package
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Union

from filelock import FileLock, Timeout as LockTimeout

logger = logging.getLogger(__name__)

__all__ = ["LockManager", "LockTimeout"]


def _safe_name(name: str) -> str:
    return name.replace("/", "-").replace("\\", "-").replace(":", "-")


class LockManager:
    """
    Manages advisory locks for codeckit resources.

    Attributes:
        lock_dir: Directory where lock files are stored
    """

    def __init__(self, lock_dir: Union[str, Path]):
        self.lock_dir = Path(lock_dir)

    @contextmanager
    def _acquire(self, lock_path: Path, timeout: float, busy_message: str):
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(str(lock_path), timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired lock: {lock_path}")
                yield
                logger.debug(f"Released lock: {lock_path}")
        except LockTimeout as e:
            logger.error(busy_message)
            raise LockTimeout(str(lock_path)) from e

    @contextmanager
    def release_lock(self, version: str, timeout: float = 600):
        """
        Acquire the lock for provisioning one NDK release.

        Args:
            version: NDK version string (e.g. 'r26b')
            timeout: Maximum wait time in seconds

        Raises:
            LockTimeout: If lock can't be acquired within timeout
        """
        lock_path = self.lock_dir / f".ndk-{_safe_name(version)}.lock"
        with self._acquire(
            lock_path,
            timeout,
            f"Could not acquire lock for NDK {version} after {timeout}s. "
            "Another process may be installing it.",
        ):
            yield

    @contextmanager
    def abi_lock(self, abi: str, timeout: float = 5):
        """
        Acquire the lock for one per-ABI output directory.

        The lock file sits next to the ABI directory so taking the lock never
        creates the directory itself.

        Args:
            abi: Canonical ABI name (e.g. 'arm64-v8a')
            timeout: Maximum wait time in seconds

        Raises:
            LockTimeout: If another build of the same ABI holds the lock

        Example:
            >>> manager = LockManager(Path('packages/safe-core'))
            >>> with manager.abi_lock('x86_64'):
            ...     build()
        """
        lock_path = self.lock_dir / f".{_safe_name(abi)}.lock"
        with self._acquire(
            lock_path,
            timeout,
            f"Another build for {abi} is running (lock: {lock_path}). "
            "Builds for the same architecture must run one at a time.",
        ):
            yield
