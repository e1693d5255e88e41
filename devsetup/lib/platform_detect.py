from __future__ import annotations

import logging
import platform
import sys
from typing import Optional

from ..errors import UnsupportedPlatformError
from ..models import Arch, OSFamily, PlatformInfo

logger = logging.getLogger(__name__)

_ARCH_MAP = {
    "x86_64": Arch.X86_64,
    "aarch64": Arch.AARCH64,
    "arm64": Arch.AARCH64,
}

# Prefix match so both sys.platform ("linux", "darwin") and
# shell OSTYPE values ("linux-gnu", "darwin23") are accepted.
_OS_PREFIXES = (
    ("linux", OSFamily.LINUX),
    ("darwin", OSFamily.MACOS),
)


def normalize_arch(machine: str) -> Arch:
    arch = _ARCH_MAP.get(machine.strip().lower())
    if arch is None:
        raise UnsupportedPlatformError(f"Unsupported architecture: {machine}")
    return arch


def normalize_os(os_type: str) -> OSFamily:
    ident = os_type.strip().lower()
    for prefix, family in _OS_PREFIXES:
        if ident.startswith(prefix):
            return family
    raise UnsupportedPlatformError(f"Unsupported OS: {os_type}")


def detect_platform(os_type: Optional[str] = None, machine: Optional[str] = None) -> PlatformInfo:
    """Resolve OS family and CPU architecture into canonical tokens.

    Arguments default to the running interpreter's view of the host.
    """

    info = PlatformInfo(
        os=normalize_os(sys.platform if os_type is None else os_type),
        arch=normalize_arch(platform.machine() if machine is None else machine),
    )
    logger.debug("Platform: %s", info)
    return info
