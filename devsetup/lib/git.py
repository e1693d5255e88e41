from __future__ import annotations

import logging
from typing import List

from ..errors import GitError
from ..models import ConfigRepo, Outcome
from .command import CommandError, CommandRunner

logger = logging.getLogger(__name__)


def _head(runner: CommandRunner, repo: ConfigRepo) -> str:
    r = runner.probe(["git", "-C", str(repo.path), "rev-parse", "HEAD"])
    if not r.ok:
        raise GitError(f"{repo.path} exists but is not a git work tree")
    return r.stdout.strip()


def _is_dirty(runner: CommandRunner, repo: ConfigRepo) -> bool:
    r = runner.probe(["git", "-C", str(repo.path), "status", "--porcelain", "--untracked-files=no"])
    return bool(r.stdout.strip())


def sync_repo(runner: CommandRunner, repo: ConfigRepo) -> List[Outcome]:
    """Clone or update a config repository, then run its post-clone script.

    A pinned repo always ends detached at its pin with tracked files
    restored; an unpinned one is fast-forwarded. Never merges or rebases.
    """

    outcomes: List[Outcome] = []
    path = str(repo.path)
    try:
        if not repo.path.exists():
            logger.info("Cloning %s...", repo.name)
            if not runner.dry_run:
                repo.path.parent.mkdir(parents=True, exist_ok=True)
            runner.run(["git", "clone", repo.url, path])
            if repo.pin:
                runner.run(["git", "-C", path, "checkout", "--detach", repo.pin])
            outcomes.append(Outcome.CLONED)
        elif repo.pin:
            if _head(runner, repo) == repo.pin:
                if _is_dirty(runner, repo):
                    logger.warning("Discarding local edits in %s", repo.path)
                    runner.run(["git", "-C", path, "checkout", "--force", "--detach", repo.pin])
                else:
                    logger.info("%s already at %s", repo.name, repo.pin[:12])
            else:
                logger.info("Updating %s to %s...", repo.name, repo.pin[:12])
                runner.run(["git", "-C", path, "fetch", "origin"])
                runner.run(["git", "-C", path, "checkout", "--force", "--detach", repo.pin])
            outcomes.append(Outcome.PINNED)
        else:
            _head(runner, repo)
            logger.info("Updating %s...", repo.name)
            runner.run(["git", "-C", path, "pull", "--ff-only"])
            outcomes.append(Outcome.UPDATED)

        if repo.post_clone:
            script = repo.path / repo.post_clone
            if script.is_file():
                logger.info("Running %s install script...", repo.name)
                runner.run(["bash", str(script)], cwd=path)
                outcomes.append(Outcome.SCRIPT_RAN)
    except CommandError as e:
        raise GitError(f"Failed to sync {repo.name}: {e}") from e

    return outcomes
