from __future__ import annotations

import logging

from ..config import CONTAINER_ENV_FILE
from ..lib.shell_rc import append_line_once
from ..pipeline import ProvisionContext

logger = logging.getLogger(__name__)


class FinalizeStep:
    step_id = "95_finalize"

    def run(self, ctx: ProvisionContext) -> None:
        cfg = ctx.config
        if cfg.is_container:
            logger.info("Finalizing ArduPilot env for the container")
            append_line_once(cfg.bashrc, f"source ~/{CONTAINER_ENV_FILE}")
        logger.info("Done. Please log out and log in again.")
