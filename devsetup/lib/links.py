from __future__ import annotations

import logging
import os
from pathlib import Path

from ..errors import LinkError
from ..models import Outcome, SymlinkRule

logger = logging.getLogger(__name__)


def backup_path(target: Path) -> Path:
    """First free `<target>.bak`, `<target>.bak.1`, ... sibling."""
    candidate = target.with_name(target.name + ".bak")
    n = 0
    while candidate.exists() or candidate.is_symlink():
        n += 1
        candidate = target.with_name(f"{target.name}.bak.{n}")
    return candidate


def ensure_dir(path: Path, *, dry_run: bool = False) -> Outcome:
    if path.is_dir():
        return Outcome.UNCHANGED
    if dry_run:
        logger.info("Would create %s", path)
        return Outcome.WRITTEN
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise LinkError(f"Cannot create directory {path}: {e}") from e
    return Outcome.WRITTEN


def ensure_symlink(rule: SymlinkRule, *, dry_run: bool = False) -> Outcome:
    """Point rule.target at rule.source without losing real user data.

    A live symlink is left alone, whatever it points at. A broken symlink is
    replaced. Real content is renamed to a .bak sibling before linking.
    """

    target = rule.target
    if target.is_symlink() and target.exists():
        return Outcome.ALREADY_LINKED

    if dry_run:
        logger.info("Would link %s -> %s", target, rule.source)
        return Outcome.LINKED

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.is_symlink():
            logger.info("Replacing broken symlink %s", target)
            target.unlink()
        elif target.exists():
            bak = backup_path(target)
            logger.info("Backing up existing %s to %s", target, bak)
            os.rename(target, bak)
        target.symlink_to(rule.source, target_is_directory=rule.source.is_dir())
    except OSError as e:
        raise LinkError(f"Cannot link {target} -> {rule.source}: {e}") from e

    return Outcome.LINKED
