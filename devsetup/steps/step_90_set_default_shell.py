from __future__ import annotations

import logging
from typing import List

from ..context import SetupCtx
from ..errors import ShellChangeError
from ..lib.shell import set_default_shell
from ..models import Effect

logger = logging.getLogger(__name__)


class SetDefaultShellStep:
    step_id = "90_set_default_shell"

    def run(self, ctx: SetupCtx) -> List[Effect]:
        name = ctx.catalog.shell_name
        shell_path = ctx.runner.which(name)
        if not shell_path:
            if ctx.dry_run:
                logger.warning("%s is not installed yet; would make it the default shell", name)
                return []
            raise ShellChangeError(f"{name} not found on PATH; cannot make it the default shell")

        outcome = set_default_shell(
            ctx.runner,
            shell_path,
            current_shell=ctx.env.get("SHELL"),
            user=ctx.user,
            shells_file=ctx.paths.shells_file,
        )
        return [Effect(self.step_id, shell_path, outcome)]
