from __future__ import annotations

import logging

from ..lib.toolchain import ensure_installed
from ..logging_utils import heading
from ..pipeline import ProvisionContext

logger = logging.getLogger(__name__)


class ToolchainStep:
    """Install one cross toolchain when the user (or environment) agrees."""

    def __init__(self, *, step_id: str, toolchain: str, env_var: str, question: str, title: str) -> None:
        self.step_id = step_id
        self.toolchain = toolchain
        self.env_var = env_var
        self.question = question
        self.title = title

    def run(self, ctx: ProvisionContext) -> None:
        cfg = ctx.config
        decision = ctx.decide(self.toolchain, self.question, env_var=self.env_var)
        if not decision.accepted:
            logger.info("Skipping %s", self.title)
            return

        heading(f"Installing {self.title}", logger)
        ensure_installed(
            cfg.toolchain(self.toolchain),
            timeout=cfg.download_timeout,
            verify_download=cfg.verify_downloads,
            allow_sudo=True,
            env=ctx.env,
        )
        logger.info("Done!")


def arm_none_eabi_step() -> ToolchainStep:
    return ToolchainStep(
        step_id="60_arm_none_eabi",
        toolchain="arm_none_eabi",
        env_var="DO_AP_STM_ENV",
        question="Install ArduPilot STM32 toolchain [N/y]?",
        title="ARM none-eabi toolchain for STM32 boards",
    )


def arm_linux_step() -> ToolchainStep:
    return ToolchainStep(
        step_id="65_arm_linux",
        toolchain="arm_linux",
        env_var="DO_ARM_LINUX",
        question="Install ARM Linux toolchain [N/y]?",
        title="ARM Linux toolchain",
    )
