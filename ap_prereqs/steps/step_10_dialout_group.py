from __future__ import annotations

import logging

from ..lib.pkg import add_user_to_group
from ..logging_utils import heading
from ..pipeline import ProvisionContext

logger = logging.getLogger(__name__)


class DialoutGroupStep:
    step_id = "10_dialout_group"

    def run(self, ctx: ProvisionContext) -> None:
        heading("Add user to dialout group to allow managing serial ports", logger)
        user = ctx.config.user
        if not user:
            raise RuntimeError("Unable to determine the current user name")
        add_user_to_group(user, "dialout", env=ctx.env)
        logger.info("Done!")
