from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence

from .config import ProvisionConfig
from .decision import Decision, Prompter, resolve_decision

logger = logging.getLogger(__name__)


@dataclass
class ProvisionContext:
    """Everything a step may read or change, passed explicitly.

    env starts as a copy of os.environ and collects what the shell version
    would have done with `source`/`eval` (venv activation, PATH prepends), so
    later commands see it.
    """

    config: ProvisionConfig
    env: Dict[str, str] = field(default_factory=lambda: dict(os.environ))
    prompt: Prompter = input
    python: Optional[str] = None
    decisions: Dict[str, Decision] = field(default_factory=dict)

    def decide(self, key: str, question: str, *, env_var: Optional[str] = None) -> Decision:
        """Resolve a decision once per key; later asks reuse the answer."""
        if key not in self.decisions:
            self.decisions[key] = resolve_decision(
                question,
                override=self.config.env(env_var) if env_var else None,
                assume_yes=self.config.assume_yes,
                prompt=self.prompt,
            )
        return self.decisions[key]

    def accepted(self, key: str) -> bool:
        d = self.decisions.get(key)
        return bool(d and d.accepted)


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, ctx: ProvisionContext) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]


def run_pipeline(*, ctx: ProvisionContext, steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order; the first failure propagates and ends the run."""

    ran: List[str] = []
    for step in steps:
        logger.debug("Running step %s", step.step_id)
        step.run(ctx)
        ran.append(step.step_id)
    return PipelineResult(ran_steps=ran)
