"""
Tests for Android architecture profiles.
"""

import pytest

from codeckit.core.exceptions import UnsupportedArchitectureError
from codeckit.cross.targets import (
    ALIASES,
    DEFAULT_ARCHITECTURE,
    MIN_ANDROID_API,
    PROFILES,
    configure_architecture,
    supported_architectures,
)

ALL_NAMES = list(PROFILES) + list(ALIASES)


class TestConfigureArchitecture:
    """Test configure_architecture()."""

    @pytest.mark.parametrize("name", ALL_NAMES)
    def test_profile_invariants(self, name):
        """Test every name and alias yields a consistent profile."""
        profile = configure_architecture(name)

        assert profile.api_level >= MIN_ANDROID_API
        assert profile.abi_dir in supported_architectures()
        assert profile.cc == f"{profile.cross_prefix}{profile.api_level}-clang"
        assert profile.cxx == f"{profile.cross_prefix}{profile.api_level}-clang++"
        assert profile.target_prefix.endswith(f"{profile.api_level}-")

    @pytest.mark.parametrize(
        "alias,abi",
        [
            ("arm64", "arm64-v8a"),
            ("aarch64", "arm64-v8a"),
            ("arm", "armeabi-v7a"),
            ("arm32", "armeabi-v7a"),
            ("armv7", "armeabi-v7a"),
            ("x64", "x86_64"),
            ("i686", "x86"),
        ],
    )
    def test_aliases(self, alias, abi):
        assert configure_architecture(alias).abi_dir == abi

    def test_case_and_whitespace_insensitive(self):
        assert configure_architecture("  ARM64-V8A ").abi_dir == "arm64-v8a"

    def test_arm64_profile(self):
        profile = configure_architecture("arm64-v8a")

        assert profile.arch == "aarch64"
        assert profile.cpu == "armv8-a"
        assert profile.cc == "aarch64-linux-android24-clang"
        assert profile.extra_cflags == ""

    def test_armv7_uses_neon(self):
        profile = configure_architecture("armeabi-v7a")

        assert profile.cross_prefix == "armv7a-linux-androideabi"
        assert "-mfpu=neon" in profile.extra_cflags
        assert "-mfloat-abi=softfp" in profile.extra_cflags

    def test_x86_profiles(self):
        assert configure_architecture("x86_64").cpu == "x86-64"
        assert configure_architecture("x86").arch == "i686"

    def test_strip_name(self):
        assert configure_architecture("x86").strip_name == "i686-linux-android24-strip"

    @pytest.mark.parametrize("name", ["mips", "riscv64", "", "arm64-v8a-extra"])
    def test_unknown_name_raises(self, name):
        with pytest.raises(UnsupportedArchitectureError) as exc_info:
            configure_architecture(name)

        assert exc_info.value.supported == supported_architectures()

    def test_unknown_name_touches_nothing(self, tmp_path, monkeypatch):
        """Test a rejected name creates no directories."""
        monkeypatch.chdir(tmp_path)

        with pytest.raises(UnsupportedArchitectureError):
            configure_architecture("mips")

        assert list(tmp_path.iterdir()) == []

    def test_default(self):
        assert DEFAULT_ARCHITECTURE == "arm64-v8a"
        assert supported_architectures() == ["arm64-v8a", "armeabi-v7a", "x86_64", "x86"]
