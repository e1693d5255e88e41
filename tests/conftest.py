"""
Shared test fixtures: a fake command runner, a fake HTTP client and a
throwaway HOME under tmp_path.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from devsetup.config import SetupPaths, load_catalog
from devsetup.context import SetupCtx
from devsetup.errors import InstallError
from devsetup.lib.command import CmdResult, CommandError
from devsetup.models import Arch, OSFamily, PlatformInfo

LINUX_X86 = PlatformInfo(os=OSFamily.LINUX, arch=Arch.X86_64)
LINUX_ARM = PlatformInfo(os=OSFamily.LINUX, arch=Arch.AARCH64)
MACOS_ARM = PlatformInfo(os=OSFamily.MACOS, arch=Arch.AARCH64)

SideEffect = Callable[[List[str], Optional[str], Optional[str]], Optional[CmdResult]]


class FakeRunner:
    """Records argv lists; answers from scripted responses (latest match wins)."""

    def __init__(self, *, env: Optional[Dict[str, str]] = None, available: Optional[Dict[str, str]] = None) -> None:
        self.dry_run = False
        self.env = dict(env or {})
        self.available = dict(available or {})
        self.calls: List[List[str]] = []
        self.probes: List[List[str]] = []
        self.inputs: Dict[Tuple[str, ...], str] = {}
        self._responses: List[Tuple[Tuple[str, ...], Tuple[int, str, str, Optional[SideEffect]]]] = []

    def on(self, *prefix: str, returncode: int = 0, stdout: str = "", stderr: str = "", effect: Optional[SideEffect] = None) -> None:
        self._responses.append((tuple(prefix), (returncode, stdout, stderr, effect)))

    def _respond(self, argv: List[str], cwd: Optional[str], input_text: Optional[str]) -> CmdResult:
        for prefix, (rc, out, err, effect) in reversed(self._responses):
            if tuple(argv[: len(prefix)]) == prefix:
                if effect is not None:
                    res = effect(argv, cwd, input_text)
                    if isinstance(res, CmdResult):
                        return res
                return CmdResult(argv=argv, returncode=rc, stdout=out, stderr=err)
        return CmdResult(argv=argv, returncode=0, stdout="", stderr="")

    def run(self, argv, *, check: bool = True, cwd: Optional[str] = None, input_text: Optional[str] = None) -> CmdResult:
        argv = list(argv)
        self.calls.append(argv)
        if input_text is not None:
            self.inputs[tuple(argv)] = input_text
        r = self._respond(argv, cwd, input_text)
        if check and r.returncode != 0:
            raise CommandError(argv, r.returncode, r.stderr)
        return r

    def probe(self, argv, *, cwd: Optional[str] = None) -> CmdResult:
        argv = list(argv)
        self.probes.append(argv)
        return self._respond(argv, cwd, None)

    def which(self, name: str) -> Optional[str]:
        return self.available.get(name)

    def commands(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]


class FakeHttp:
    def __init__(self) -> None:
        self.dry_run = False
        self.json: Dict[str, Any] = {}
        self.text: Dict[str, str] = {}
        self.requests: List[str] = []
        self.downloads: List[Tuple[str, Path]] = []

    def get_json(self, url: str) -> Any:
        self.requests.append(url)
        if url not in self.json:
            raise InstallError(f"Request failed for {url}: 404")
        return self.json[url]

    def get_text(self, url: str) -> str:
        self.requests.append(url)
        if url not in self.text:
            raise InstallError(f"Request failed for {url}: 404")
        return self.text[url]

    def download(self, url: str, dest: Path) -> Path:
        self.downloads.append((url, dest))
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(b"\x7fELF fake")
        return dest


@pytest.fixture
def home(tmp_path: Path) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def paths(tmp_path: Path, home: Path) -> SetupPaths:
    assets = tmp_path / "assets"
    assets.mkdir()
    return SetupPaths(
        home=home,
        config_home=home / ".config",
        dotfiles=home / ".dotfiles",
        local_bin=home / ".local" / "bin",
        assets=assets,
        shells_file=tmp_path / "etc" / "shells",
    )


@pytest.fixture
def runner(home: Path) -> FakeRunner:
    env = {
        "HOME": str(home),
        "PATH": "/usr/bin:/bin",
        "SHELL": "/bin/bash",
        "USER": "alice",
    }
    return FakeRunner(env=env, available={"apt-get": "/usr/bin/apt-get"})


@pytest.fixture
def http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture
def make_ctx(paths: SetupPaths, runner: FakeRunner, http: FakeHttp):
    def _make(platform: Optional[PlatformInfo] = LINUX_X86) -> SetupCtx:
        return SetupCtx(
            paths=paths,
            catalog=load_catalog(paths),
            runner=runner,  # type: ignore[arg-type]
            http=http,  # type: ignore[arg-type]
            platform=platform,
        )

    return _make
