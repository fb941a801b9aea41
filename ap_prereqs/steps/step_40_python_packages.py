from __future__ import annotations

import logging

from ..lib.pyenv import pip_install
from ..logging_utils import heading
from ..pipeline import ProvisionContext

logger = logging.getLogger(__name__)

SLOW_PACKAGES = {"wxpython": "~30 minutes"}


class PythonPackagesStep:
    step_id = "40_python_packages"

    def run(self, ctx: ProvisionContext) -> None:
        cfg = ctx.config
        python = ctx.python or cfg.system_python

        heading("Installing Python packages", logger)
        for group in cfg.python_bootstrap_packages:
            pip_install(python, group, quiet=cfg.quiet, env=ctx.env)

        # One at a time so a failure names the package that broke.
        for package in cfg.python_packages:
            slow = SLOW_PACKAGES.get(package.lower())
            if slow:
                logger.info("##### %s takes a *VERY* long time to install (%s). Be patient.", package, slow)
            pip_install(python, [package], quiet=cfg.quiet, env=ctx.env)
        logger.info("Done!")
