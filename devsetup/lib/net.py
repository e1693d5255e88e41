from __future__ import annotations

import json
import logging
import shutil
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any

from ..errors import InstallError

logger = logging.getLogger(__name__)

_USER_AGENT = "devsetup/1.0"


class HttpClient:
    """Blocking HTTP fetches for release metadata, installers and assets.

    No timeout and no retry: a failure aborts the run and the run is safe to repeat.
    """

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def _open(self, url: str, *, accept: str = "*/*"):
        req = urllib.request.Request(url, headers={"Accept": accept, "User-Agent": _USER_AGENT})
        try:
            return urllib.request.urlopen(req)
        except (urllib.error.URLError, OSError) as e:
            raise InstallError(f"Request failed for {url}: {e}") from e

    def get_json(self, url: str) -> Any:
        logger.debug("GET %s", url)
        with self._open(url, accept="application/json") as resp:
            raw = resp.read()
        try:
            return json.loads(raw)
        except ValueError as e:
            raise InstallError(f"Invalid JSON from {url}: {e}") from e

    def get_text(self, url: str) -> str:
        logger.debug("GET %s", url)
        with self._open(url) as resp:
            return resp.read().decode("utf-8")

    def download(self, url: str, dest: Path) -> Path:
        if self.dry_run:
            logger.info("Would download %s -> %s", url, dest)
            return dest
        logger.info("Downloading %s", url)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            with self._open(url) as resp, open(dest, "wb") as out:
                shutil.copyfileobj(resp, out)
        except OSError as e:
            raise InstallError(f"Download of {url} to {dest} failed: {e}") from e
        return dest
