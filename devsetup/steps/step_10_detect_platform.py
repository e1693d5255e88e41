from __future__ import annotations

import logging
from typing import List, Optional

from ..context import SetupCtx
from ..lib.platform_detect import detect_platform
from ..models import Effect, Outcome

logger = logging.getLogger(__name__)


class DetectPlatformStep:
    step_id = "10_detect_platform"

    def __init__(self, *, os_type: Optional[str] = None, machine: Optional[str] = None) -> None:
        self.os_type = os_type
        self.machine = machine

    def run(self, ctx: SetupCtx) -> List[Effect]:
        info = detect_platform(os_type=self.os_type, machine=self.machine)
        ctx.platform = info
        logger.info("Detected OS: %s", info.os.value)
        logger.info("Detected architecture: %s", info.arch.value)
        return [Effect(self.step_id, "platform", Outcome.DETECTED, str(info))]
