from __future__ import annotations

import logging

from ..lib.git import is_git_checkout, update_submodules
from ..logging_utils import heading
from ..pipeline import ProvisionContext

logger = logging.getLogger(__name__)


class GitSubmodulesStep:
    step_id = "90_git_submodules"

    def run(self, ctx: ProvisionContext) -> None:
        cfg = ctx.config
        if cfg.skip("SKIP_AP_GIT_CHECK"):
            logger.info("SKIP_AP_GIT_CHECK=1, not touching git submodules")
            return
        if not is_git_checkout(cfg.project_root):
            logger.info("%s is not a git checkout, skipping submodules", cfg.project_root)
            return

        heading("Update git submodules", logger)
        update_submodules(cfg.project_root, env=ctx.env)
        logger.info("Done!")
