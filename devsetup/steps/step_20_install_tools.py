from __future__ import annotations

import logging
from typing import List

from ..context import SetupCtx
from ..errors import AssetNotFoundError
from ..installer import ensure_installed
from ..models import Effect, Outcome

logger = logging.getLogger(__name__)


class InstallToolsStep:
    """Install every tool of one catalog group, in catalog order."""

    def __init__(self, step_id: str, group: str) -> None:
        self.step_id = step_id
        self.group = group

    def run(self, ctx: SetupCtx) -> List[Effect]:
        platform = ctx.require_platform()
        tools = ctx.catalog.group(self.group)
        if not tools:
            logger.warning("No tools listed for group %s", self.group)
            return []

        logger.info("Installing %s tools: %s", self.group, ", ".join(t.name for t in tools))
        effects: List[Effect] = []
        for spec in tools:
            try:
                outcome = ensure_installed(ctx, spec, platform)
            except AssetNotFoundError as e:
                # Only a missing platform asset is tolerated; the run moves on.
                logger.error("Could not find %s release for %s: %s", spec.name, platform, e)
                effects.append(Effect(self.step_id, spec.name, Outcome.SKIPPED, str(e)))
                continue
            effects.append(Effect(self.step_id, spec.name, outcome))
        return effects
