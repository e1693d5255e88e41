from __future__ import annotations

import logging
from typing import List

from ..context import SetupCtx
from ..lib.assets import install_file
from ..lib.git import sync_repo
from ..lib.links import ensure_dir, ensure_symlink
from ..models import Effect, Outcome

logger = logging.getLogger(__name__)


class ProvisionConfigsStep:
    step_id = "80_provision_configs"

    def run(self, ctx: SetupCtx) -> List[Effect]:
        cat = ctx.catalog
        effects: List[Effect] = []

        logger.info("Setting up configuration repositories...")
        ensure_dir(ctx.paths.dotfiles, dry_run=ctx.dry_run)
        for repo in cat.repos:
            for outcome in sync_repo(ctx.runner, repo):
                effects.append(Effect(self.step_id, repo.name, outcome, str(repo.path)))

        logger.info("Setting up symlinks...")
        for rule in cat.links:
            outcome = ensure_symlink(rule, dry_run=ctx.dry_run)
            if outcome == Outcome.ALREADY_LINKED:
                logger.info("%s symlink already exists", rule.target)
            else:
                logger.info("Linked %s -> %s", rule.target, rule.source)
            effects.append(Effect(self.step_id, str(rule.target), outcome, str(rule.source)))

        for d in cat.directories:
            outcome = ensure_dir(d, dry_run=ctx.dry_run)
            effects.append(Effect(self.step_id, str(d), outcome))

        for rule in cat.files:
            if not rule.source.is_file():
                logger.debug("No %s to install", rule.source)
                continue
            outcome = install_file(rule.source, rule.target, dry_run=ctx.dry_run)
            if outcome == Outcome.WRITTEN:
                logger.info("Installed %s", rule.target)
            effects.append(Effect(self.step_id, str(rule.target), outcome, str(rule.source)))

        return effects
