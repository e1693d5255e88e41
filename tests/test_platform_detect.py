"""
Tests for OS / architecture normalization.
"""

import pytest

from devsetup.errors import UnsupportedPlatformError
from devsetup.lib.platform_detect import detect_platform, normalize_arch, normalize_os
from devsetup.models import Arch, OSFamily, PlatformInfo


@pytest.mark.parametrize(
    "os_type, machine, expected",
    [
        ("linux", "x86_64", PlatformInfo(OSFamily.LINUX, Arch.X86_64)),
        ("linux-gnu", "aarch64", PlatformInfo(OSFamily.LINUX, Arch.AARCH64)),
        ("linux", "arm64", PlatformInfo(OSFamily.LINUX, Arch.AARCH64)),
        ("darwin", "arm64", PlatformInfo(OSFamily.MACOS, Arch.AARCH64)),
        ("darwin23", "x86_64", PlatformInfo(OSFamily.MACOS, Arch.X86_64)),
    ],
)
def test_supported_pairs(os_type, machine, expected):
    assert detect_platform(os_type=os_type, machine=machine) == expected


@pytest.mark.parametrize("os_type", ["win32", "cygwin", "freebsd13", ""])
def test_unsupported_os(os_type):
    with pytest.raises(UnsupportedPlatformError, match="Unsupported OS"):
        detect_platform(os_type=os_type, machine="x86_64")


@pytest.mark.parametrize("machine", ["armv7l", "i686", "riscv64", "ppc64le", ""])
def test_unsupported_arch(machine):
    with pytest.raises(UnsupportedPlatformError, match="Unsupported architecture"):
        detect_platform(os_type="linux", machine=machine)


def test_arm64_and_aarch64_are_the_same_token():
    assert normalize_arch("arm64") is normalize_arch("aarch64") is Arch.AARCH64
    assert normalize_arch("ARM64") is Arch.AARCH64


def test_normalize_os_prefix():
    assert normalize_os("linux-gnueabihf") is OSFamily.LINUX
    assert normalize_os("darwin") is OSFamily.MACOS
