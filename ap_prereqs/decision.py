from __future__ import annotations

import enum
import logging
import re
from typing import Callable, Optional

logger = logging.getLogger(__name__)

_YES_RE = re.compile(r"^[Yy]$")

Prompter = Callable[[str], str]


class Decision(enum.Enum):
    YES = "yes"
    NO = "no"
    ASSUME_YES = "assume_yes"

    @property
    def accepted(self) -> bool:
        return self is not Decision.NO


def resolve_decision(
    question: str,
    *,
    override: Optional[str] = None,
    assume_yes: bool = False,
    prompt: Prompter = input,
) -> Decision:
    """Resolve a yes/no question once.

    A set override value wins: "1" accepts, anything else declines, and the
    user is not asked. Otherwise -y accepts, and finally the user is prompted;
    only a single "y"/"Y" counts as yes. Closed stdin reads as no.
    """

    if override is not None and override != "":
        decision = Decision.YES if override.strip() == "1" else Decision.NO
        logger.debug("%s -> %s (environment)", question, decision.value)
        return decision

    if assume_yes:
        return Decision.ASSUME_YES

    try:
        reply = prompt(question)
    except EOFError:
        logger.info("%s -> no (no input available)", question)
        return Decision.NO
    decision = Decision.YES if _YES_RE.match((reply or "").strip()) else Decision.NO
    logger.info("%s -> %s", question, decision.value)
    return decision
