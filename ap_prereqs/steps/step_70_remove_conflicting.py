from __future__ import annotations

import logging

from ..lib.pkg import dnf_remove, package_is_installed
from ..logging_utils import heading
from ..pipeline import ProvisionContext

logger = logging.getLogger(__name__)


class RemoveConflictingPackagesStep:
    step_id = "70_remove_conflicting"

    def run(self, ctx: ProvisionContext) -> None:
        heading("Removing modemmanager and brltty packages that could conflict with firmware uploading", logger)
        for package in ctx.config.conflicting_packages:
            if package_is_installed(package, env=ctx.env):
                dnf_remove(package, env=ctx.env)
        logger.info("Done!")
