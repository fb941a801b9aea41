from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NamedTuple

from ..lib.shell_rc import append_line, apply_export_line, has_line, path_export_line
from ..logging_utils import heading
from ..pipeline import ProvisionContext

logger = logging.getLogger(__name__)


class ShellLine(NamedTuple):
    key: str
    target: Path
    line: str
    question: str
    skip_message: str
    exports_path: bool


class ShellEnvStep:
    step_id = "80_shell_env"

    def lines(self, ctx: ProvisionContext) -> List[ShellLine]:
        cfg = ctx.config
        out: List[ShellLine] = []

        for name in ("arm_none_eabi", "arm_linux"):
            if not ctx.accepted(name):
                continue
            bin_dir = cfg.toolchain(name).bin_dir
            out.append(
                ShellLine(
                    key=f"path_{name}",
                    target=cfg.shell_login,
                    line=path_export_line(bin_dir),
                    question=f"Add {bin_dir} to your PATH [N/y]?",
                    skip_message=f"Skipping adding {bin_dir} to PATH.",
                    exports_path=True,
                )
            )

        out.append(
            ShellLine(
                key="path_autotest",
                target=cfg.shell_login,
                line=path_export_line(cfg.autotest_dir, quoted=True),
                question=f"Add {cfg.autotest_dir} to your PATH [N/y]?",
                skip_message=f"Skipping adding {cfg.autotest_dir} to PATH.",
                exports_path=True,
            )
        )

        if not cfg.skip("SKIP_AP_COMPLETION_ENV"):
            out.append(
                ShellLine(
                    key="bash_completion",
                    target=cfg.bashrc,
                    line=f'source "{cfg.completion_script}"',
                    question="Add ArduPilot Bash Completion to your bash shell [N/y]?",
                    skip_message="Skipping adding ArduPilot Bash Completion.",
                    exports_path=False,
                )
            )

        out.append(
            ShellLine(
                key="path_ccache",
                target=cfg.shell_login,
                line=path_export_line(cfg.ccache_dir),
                question="Append CCache to your PATH [N/y]?",
                skip_message="Skipping appending CCache to PATH.",
                exports_path=True,
            )
        )
        return out

    def run(self, ctx: ProvisionContext) -> None:
        heading("Adding ArduPilot Tools to environment", logger)
        for item in self.lines(ctx):
            if has_line(item.target, item.line):
                continue
            if not ctx.decide(item.key, item.question).accepted:
                logger.info(item.skip_message)
                continue
            append_line(item.target, item.line)
            if item.exports_path:
                ctx.env = apply_export_line(item.line, ctx.env)
        logger.info("Done!")
