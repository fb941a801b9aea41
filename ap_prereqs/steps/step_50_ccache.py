from __future__ import annotations

import logging

from ..lib.ccache import link_compilers, set_config
from ..logging_utils import heading
from ..pipeline import ProvisionContext

logger = logging.getLogger(__name__)


class CcacheStep:
    step_id = "50_ccache"

    def run(self, ctx: ProvisionContext) -> None:
        cfg = ctx.config
        heading("Setting up ccache for ARM compilers", logger)
        created = link_compilers(cfg.ccache_dir, cfg.ccache_compilers, env=ctx.env)
        if created:
            logger.info("Linked %s to ccache", ", ".join(created))
        set_config(cfg.ccache_settings, env=ctx.env)
        logger.info("Done!")
