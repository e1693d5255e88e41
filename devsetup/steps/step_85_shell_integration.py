from __future__ import annotations

import logging
from typing import List

from ..context import SetupCtx
from ..lib.assets import write_text_file
from ..models import Effect

logger = logging.getLogger(__name__)


class ShellIntegrationStep:
    step_id = "85_shell_integration"

    def run(self, ctx: SetupCtx) -> List[Effect]:
        integ = ctx.catalog.shell_integration
        if integ is None:
            return []

        logger.info("Setting up %s aliases...", ctx.catalog.shell_name)
        outcome = write_text_file(integ.path, integ.contents, dry_run=ctx.dry_run)
        logger.info("%s aliases configured (%s)", ctx.catalog.shell_name, outcome.value)
        return [Effect(self.step_id, str(integ.path), outcome)]
