from __future__ import annotations

import filecmp
import logging
import shutil
from pathlib import Path

from ..errors import LinkError
from ..models import Outcome

logger = logging.getLogger(__name__)


def install_file(src: Path, dst: Path, *, dry_run: bool = False) -> Outcome:
    """Copy src to dst unless dst already has identical content."""

    if not src.is_file():
        raise FileNotFoundError(str(src))

    if dst.is_file() and filecmp.cmp(src, dst, shallow=False):
        return Outcome.UNCHANGED

    if dry_run:
        logger.info("Would copy %s -> %s", src, dst)
        return Outcome.WRITTEN

    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)
    except OSError as e:
        raise LinkError(f"Cannot copy {src} -> {dst}: {e}") from e
    return Outcome.WRITTEN


def write_text_file(dst: Path, contents: str, *, dry_run: bool = False) -> Outcome:
    if dst.is_file() and dst.read_text(encoding="utf-8") == contents:
        return Outcome.UNCHANGED

    if dry_run:
        logger.info("Would write %s", dst)
        return Outcome.WRITTEN

    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        dst.write_text(contents, encoding="utf-8")
    except OSError as e:
        raise LinkError(f"Cannot write {dst}: {e}") from e
    return Outcome.WRITTEN
