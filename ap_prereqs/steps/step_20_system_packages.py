from __future__ import annotations

import logging

from ..lib.pkg import dnf_install
from ..logging_utils import heading
from ..pipeline import ProvisionContext

logger = logging.getLogger(__name__)


class BasePackagesStep:
    step_id = "20_base_packages"

    def run(self, ctx: ProvisionContext) -> None:
        cfg = ctx.config
        heading("Installing base packages", logger)
        dnf_install(cfg.base_packages, assume_yes=cfg.assume_yes, quiet=cfg.quiet, env=ctx.env)
        logger.info("Done!")


class SitlPackagesStep:
    step_id = "25_sitl_packages"

    def run(self, ctx: ProvisionContext) -> None:
        cfg = ctx.config
        heading("Installing SITL packages", logger)
        dnf_install(cfg.sitl_packages, assume_yes=cfg.assume_yes, quiet=cfg.quiet, env=ctx.env)
        logger.info("Done!")
