from __future__ import annotations

import logging

from ..errors import InstallError
from ..models import OSFamily, PlatformInfo
from .command import CommandError, CommandRunner

logger = logging.getLogger(__name__)


class AptPackageManager:
    name = "apt"

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner
        self._updated = False

    def ensure_available(self) -> None:
        if self.runner.which("apt-get") is None:
            raise InstallError("apt not found. This script requires an apt-based Linux distribution.")

    def is_installed(self, package: str) -> bool:
        # apt installs are detected by command lookup only.
        return False

    def update(self) -> None:
        if self._updated:
            return
        self.runner.run(["sudo", "apt-get", "update"])
        self._updated = True

    def install(self, package: str) -> None:
        self.ensure_available()
        try:
            self.update()
            self.runner.run(["sudo", "apt-get", "install", "-y", package])
        except CommandError as e:
            raise InstallError(f"apt failed to install {package}: {e}") from e


class BrewPackageManager:
    name = "brew"

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def ensure_available(self) -> None:
        if self.runner.which("brew") is None:
            raise InstallError("Homebrew not found. Please install Homebrew first.")

    def is_installed(self, package: str) -> bool:
        self.ensure_available()
        return self.runner.probe(["brew", "list", package]).ok

    def install(self, package: str) -> None:
        self.ensure_available()
        try:
            self.runner.run(["brew", "install", package])
        except CommandError as e:
            raise InstallError(f"brew failed to install {package}: {e}") from e


def package_manager_for(platform: PlatformInfo, runner: CommandRunner):
    if platform.os == OSFamily.LINUX:
        return AptPackageManager(runner)
    return BrewPackageManager(runner)
