from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol, Sequence

from .context import SetupCtx
from .models import Effect

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, ctx: SetupCtx) -> List[Effect]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    effects: List[Effect]
    ran_steps: List[str]

    def count(self, outcome) -> int:
        return sum(1 for e in self.effects if e.outcome == outcome)


def run_pipeline(
    *,
    ctx: SetupCtx,
    steps: Sequence[Step],
) -> PipelineResult:
    """Run steps in order; the first exception aborts the rest.

    Nothing is rolled back and nothing is checkpointed: a re-run starts from
    the first step and relies on each step being idempotent.
    """

    effects: List[Effect] = []
    ran: List[str] = []

    for step in steps:
        ctx.current_step = step.step_id
        logger.debug("Running step %s", step.step_id)
        effects.extend(step.run(ctx))
        ran.append(step.step_id)

    ctx.current_step = None
    return PipelineResult(effects=effects, ran_steps=ran)
