from __future__ import annotations

import getpass
from dataclasses import dataclass, field
from typing import Any, Optional

from .config import Catalog, SetupPaths
from .lib.command import CommandRunner
from .lib.net import HttpClient
from .lib.pkg import package_manager_for
from .models import PlatformInfo


@dataclass
class SetupCtx:
    """Everything a step reads or acts through.

    `platform` is filled in by the detect step; every later step relies on it.
    """

    paths: SetupPaths
    catalog: Catalog
    runner: CommandRunner
    http: HttpClient
    dry_run: bool = False
    platform: Optional[PlatformInfo] = None
    current_step: Optional[str] = None
    _pkg: Any = field(default=None, repr=False)

    @property
    def env(self):
        return self.runner.env

    @property
    def user(self) -> str:
        return self.env.get("USER") or getpass.getuser()

    def require_platform(self) -> PlatformInfo:
        if self.platform is None:
            raise RuntimeError("platform not detected yet (10_detect_platform must run first)")
        return self.platform

    @property
    def pkg(self):
        # One instance per run so apt-get update happens at most once.
        if self._pkg is None:
            self._pkg = package_manager_for(self.require_platform(), self.runner)
        return self._pkg

    def path_entries(self) -> list[str]:
        return [p.rstrip("/") for p in (self.env.get("PATH") or "").split(":") if p]

    def on_path(self, directory: str) -> bool:
        return directory.rstrip("/") in self.path_entries()
