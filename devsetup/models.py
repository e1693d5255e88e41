from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple


class OSFamily(str, Enum):
    LINUX = "linux"
    MACOS = "macos"


class Arch(str, Enum):
    X86_64 = "x86_64"
    AARCH64 = "aarch64"


@dataclass(frozen=True)
class PlatformInfo:
    os: OSFamily
    arch: Arch

    def __str__(self) -> str:
        return f"{self.os.value}/{self.arch.value}"


class InstallMethod(str, Enum):
    PACKAGE_MANAGER = "package-manager"
    RELEASE_DOWNLOAD = "release-download"
    INSTALL_SCRIPT = "install-script"


@dataclass(frozen=True)
class InstallSource:
    """Where a tool comes from on one OS family."""

    method: InstallMethod
    # package-manager
    package: Optional[str] = None
    # release-download
    provider: str = "github"
    repo: Optional[str] = None
    asset: Optional[str] = None
    arch_names: Mapping[str, str] = field(default_factory=dict)
    binary: Optional[str] = None
    archive: bool = False
    extract_to: Optional[str] = None
    replaces: Optional[str] = None
    path_hint: Optional[str] = None
    # install-script
    url: Optional[str] = None
    shell: str = "sh"

    def asset_pattern(self, arch: Arch) -> str:
        """Render the asset glob for an architecture using this source's spelling of it."""
        spelled = self.arch_names.get(arch.value, arch.value)
        return (self.asset or "").replace("{arch}", spelled)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    command: str
    sources: Mapping[OSFamily, InstallSource]
    probes: Tuple[str, ...] = ()
    probe_paths: Tuple[str, ...] = ()

    def source_for(self, platform: PlatformInfo) -> Optional[InstallSource]:
        return self.sources.get(platform.os)

    @property
    def probe_commands(self) -> Tuple[str, ...]:
        return (self.command, *[p for p in self.probes if p != self.command])


@dataclass(frozen=True)
class ConfigRepo:
    name: str
    url: str
    path: Path
    pin: Optional[str] = None
    post_clone: Optional[str] = None


@dataclass(frozen=True)
class SymlinkRule:
    target: Path
    source: Path


@dataclass(frozen=True)
class FileRule:
    source: Path
    target: Path


class Outcome(str, Enum):
    DETECTED = "detected"
    INSTALLED = "installed"
    ALREADY_PRESENT = "already_present"
    SKIPPED = "skipped"
    CLONED = "cloned"
    UPDATED = "updated"
    PINNED = "pinned"
    SCRIPT_RAN = "script_ran"
    LINKED = "linked"
    ALREADY_LINKED = "already_linked"
    WRITTEN = "written"
    UNCHANGED = "unchanged"
    SHELL_CHANGED = "shell_changed"
    SHELL_UNCHANGED = "shell_unchanged"


@dataclass(frozen=True)
class Effect:
    """What a step did (or found already done) to one subject."""

    step: str
    subject: str
    outcome: Outcome
    detail: str = ""

    def as_dict(self) -> Dict[str, str]:
        return {
            "step": self.step,
            "subject": self.subject,
            "outcome": self.outcome.value,
            "detail": self.detail,
        }
