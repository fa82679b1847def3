"""
Tests for advisory locking.
"""

import threading

import pytest

from codeckit.core.locking import LockManager, LockTimeout


class TestLockManager:
    """Test LockManager."""

    def test_init_does_not_create_directory(self, tmp_path):
        """Test constructing a manager has no side effects."""
        LockManager(tmp_path / "locks")
        assert not (tmp_path / "locks").exists()

    def test_abi_lock_file_beside_abi_dir(self, tmp_path):
        """Test the ABI lock never creates the ABI directory."""
        manager = LockManager(tmp_path / "out")

        with manager.abi_lock("arm64-v8a"):
            assert (tmp_path / "out" / ".arm64-v8a.lock").exists()

        assert not (tmp_path / "out" / "arm64-v8a").exists()

    def test_release_lock(self, tmp_path):
        manager = LockManager(tmp_path)

        with manager.release_lock("r26b"):
            assert (tmp_path / ".ndk-r26b.lock").exists()

    def test_lock_is_reacquirable(self, tmp_path):
        manager = LockManager(tmp_path)

        with manager.abi_lock("x86"):
            pass
        with manager.abi_lock("x86"):
            pass

    def test_same_abi_contends(self, tmp_path):
        """Test a second holder of the same ABI lock times out."""
        manager = LockManager(tmp_path)
        holding = threading.Event()
        release = threading.Event()

        def hold():
            with manager.abi_lock("x86_64"):
                holding.set()
                release.wait(5)

        thread = threading.Thread(target=hold)
        thread.start()
        try:
            assert holding.wait(5)
            with pytest.raises(LockTimeout):
                with LockManager(tmp_path).abi_lock("x86_64", timeout=0.1):
                    pass
        finally:
            release.set()
            thread.join()

    def test_different_abis_do_not_contend(self, tmp_path):
        manager = LockManager(tmp_path)

        with manager.abi_lock("x86_64", timeout=0.1):
            with manager.abi_lock("x86", timeout=0.1):
                pass
