from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence

from ..errors import AssetNotFoundError, InstallError
from ..models import Arch, InstallSource
from .net import HttpClient

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
GO_DL_INDEX = "https://go.dev/dl/?mode=json"
GO_DL_BASE = "https://go.dev/dl/"


@dataclass(frozen=True)
class ReleaseAsset:
    name: str
    url: str
    version: str = ""


def github_latest_assets(http: HttpClient, source: InstallSource) -> List[ReleaseAsset]:
    if not source.repo:
        raise InstallError("github release source needs a repo")
    data = http.get_json(f"{GITHUB_API}/repos/{source.repo}/releases/latest")
    if not isinstance(data, dict):
        raise InstallError(f"Unexpected release payload for {source.repo}")
    tag = str(data.get("tag_name") or "")
    return [
        ReleaseAsset(name=str(a.get("name") or ""), url=str(a.get("browser_download_url") or ""), version=tag)
        for a in data.get("assets") or []
        if isinstance(a, dict)
    ]


def go_latest_assets(http: HttpClient, source: InstallSource) -> List[ReleaseAsset]:
    """Files of the newest stable release in the Go download index."""
    data = http.get_json(GO_DL_INDEX)
    if not isinstance(data, list):
        raise InstallError("Unexpected payload from the Go download index")
    for release in data:
        if not isinstance(release, dict) or not release.get("stable"):
            continue
        version = str(release.get("version") or "")
        return [
            ReleaseAsset(name=str(f["filename"]), url=GO_DL_BASE + str(f["filename"]), version=version)
            for f in release.get("files") or []
            if isinstance(f, dict) and f.get("filename")
        ]
    return []


PROVIDERS: Dict[str, Callable[[HttpClient, InstallSource], List[ReleaseAsset]]] = {
    "github": github_latest_assets,
    "go": go_latest_assets,
}


def select_asset(assets: Sequence[ReleaseAsset], pattern: str) -> ReleaseAsset:
    for asset in assets:
        if fnmatch.fnmatchcase(asset.name, pattern):
            return asset
    available = ", ".join(a.name for a in assets[:10]) or "none"
    raise AssetNotFoundError(f"No release asset matching '{pattern}' (available: {available})")


def find_latest_asset(http: HttpClient, source: InstallSource, arch: Arch) -> ReleaseAsset:
    provider = PROVIDERS.get(source.provider)
    if provider is None:
        raise InstallError(f"Unknown release provider: {source.provider}")
    assets = provider(http, source)
    asset = select_asset(assets, source.asset_pattern(arch))
    logger.debug("Selected asset %s (%s)", asset.name, asset.version)
    return asset
