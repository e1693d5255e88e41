from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .lib.manifests import load_catalog_manifest
from .models import (
    ConfigRepo,
    FileRule,
    InstallMethod,
    InstallSource,
    OSFamily,
    SymlinkRule,
    ToolSpec,
)

LOG_ENV_VAR = "DEVSETUP_LOG"


@dataclass(frozen=True)
class SetupPaths:
    home: Path
    config_home: Path
    dotfiles: Path
    local_bin: Path
    assets: Path
    shells_file: Path = Path("/etc/shells")

    @classmethod
    def from_environ(cls, env: Optional[Mapping[str, str]] = None, *, cwd: Optional[Path] = None) -> "SetupPaths":
        env = os.environ if env is None else env
        home = Path(env.get("HOME") or Path.home())
        config_home = Path(env.get("XDG_CONFIG_HOME") or home / ".config")
        return cls(
            home=home,
            config_home=config_home,
            dotfiles=home / ".dotfiles",
            local_bin=home / ".local" / "bin",
            assets=cwd or Path.cwd(),
        )

    @property
    def default_log_path(self) -> Path:
        return self.home / ".local" / "state" / "devsetup" / "devsetup.log"

    def expand(self, template: str) -> Path:
        return Path(self.render(template))

    def render(self, template: str) -> str:
        return template.format(
            home=self.home,
            config_home=self.config_home,
            dotfiles=self.dotfiles,
            local_bin=self.local_bin,
            assets=self.assets,
        )


@dataclass(frozen=True)
class FileIntegration:
    path: Path
    contents: str


def _parse_source(name: str, raw: Dict[str, Any], paths: SetupPaths) -> InstallSource:
    try:
        method = InstallMethod(raw.get("method"))
    except ValueError as e:
        raise ValueError(f"Tool {name}: unknown install method {raw.get('method')!r}") from e
    return InstallSource(
        method=method,
        package=raw.get("package") or (name if method == InstallMethod.PACKAGE_MANAGER else None),
        provider=str(raw.get("provider") or "github"),
        repo=raw.get("repo"),
        asset=raw.get("asset"),
        arch_names=dict(raw.get("arch_names") or {}),
        binary=raw.get("binary"),
        archive=bool(raw.get("archive", False)),
        extract_to=raw.get("extract_to"),
        replaces=raw.get("replaces"),
        path_hint=paths.render(str(raw["path_hint"])) if raw.get("path_hint") else None,
        url=raw.get("url"),
        shell=str(raw.get("shell") or "sh"),
    )


@dataclass(frozen=True)
class Catalog:
    """Typed view over the packaged catalog manifest."""

    raw: Dict[str, Any]
    paths: SetupPaths

    @property
    def groups(self) -> Dict[str, List[str]]:
        return {str(k): [str(t) for t in (v or [])] for k, v in (self.raw.get("groups") or {}).items()}

    def tool(self, name: str) -> ToolSpec:
        tools = self.raw.get("tools") or {}
        if name not in tools:
            raise KeyError(f"Unknown tool: {name}")
        raw = tools[name] or {}
        sources = {
            OSFamily(os_name): _parse_source(name, src or {}, self.paths)
            for os_name, src in (raw.get("install") or {}).items()
        }
        return ToolSpec(
            name=name,
            command=str(raw.get("command") or name),
            sources=sources,
            probes=tuple(str(p) for p in raw.get("probes") or []),
            probe_paths=tuple(self.paths.render(str(p)) for p in raw.get("probe_paths") or []),
        )

    def group(self, group: str) -> List[ToolSpec]:
        return [self.tool(name) for name in self.groups.get(group, [])]

    @property
    def repos(self) -> List[ConfigRepo]:
        out: List[ConfigRepo] = []
        for name, raw in (self.raw.get("repos") or {}).items():
            raw = raw or {}
            out.append(
                ConfigRepo(
                    name=str(name),
                    url=str(raw["url"]),
                    path=self.paths.expand(str(raw["path"])),
                    pin=raw.get("pin"),
                    post_clone=raw.get("post_clone"),
                )
            )
        return out

    @property
    def links(self) -> List[SymlinkRule]:
        return [
            SymlinkRule(target=self.paths.expand(str(r["target"])), source=self.paths.expand(str(r["source"])))
            for r in self.raw.get("links") or []
        ]

    @property
    def directories(self) -> List[Path]:
        return [self.paths.expand(str(d)) for d in self.raw.get("directories") or []]

    @property
    def files(self) -> List[FileRule]:
        return [
            FileRule(source=self.paths.expand(str(r["source"])), target=self.paths.expand(str(r["target"])))
            for r in self.raw.get("files") or []
        ]

    @property
    def shell_name(self) -> str:
        return str((self.raw.get("shell") or {}).get("name") or "fish")

    @property
    def shell_integration(self) -> Optional[FileIntegration]:
        integ = (self.raw.get("shell") or {}).get("integration")
        if not integ:
            return None
        return FileIntegration(path=self.paths.expand(str(integ["path"])), contents=str(integ.get("contents") or ""))


def load_catalog(paths: SetupPaths, raw: Optional[Dict[str, Any]] = None) -> Catalog:
    return Catalog(raw=load_catalog_manifest() if raw is None else raw, paths=paths)
