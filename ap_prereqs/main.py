from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from .config import load_config
from .lib.command import CommandError
from .lib.toolchain import FetchError
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import ProvisionContext, Step, run_pipeline
from .steps import (
    BasePackagesStep,
    CcacheStep,
    DialoutGroupStep,
    FinalizeStep,
    GitSubmodulesStep,
    PythonPackagesStep,
    PythonVenvStep,
    RemoveConflictingPackagesStep,
    ShellEnvStep,
    SitlPackagesStep,
    arm_linux_step,
    arm_none_eabi_step,
)

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_steps() -> List[Step]:
    return [
        DialoutGroupStep(),
        BasePackagesStep(),
        SitlPackagesStep(),
        PythonVenvStep(),
        PythonPackagesStep(),
        CcacheStep(),
        arm_none_eabi_step(),
        arm_linux_step(),
        RemoveConflictingPackagesStep(),
        ShellEnvStep(),
        GitSubmodulesStep(),
        FinalizeStep(),
    ]


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(prog="ap-install-prereqs", description="Install ArduPilot build prerequisites")
    p.add_argument("-y", dest="assume_yes", action="store_true", help="Assume yes to all questions")
    p.add_argument("-q", dest="quiet", action="store_true", help="Quiet dnf and pip output")
    p.add_argument("--config", default=None, help="YAML file overriding package lists and toolchains")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to the installer log")
    p.add_argument("--root", default=None, help="ArduPilot checkout (default: current directory)")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if os.geteuid() == 0:
        print("Please do not run this script as root; don't sudo it!", file=sys.stderr)
        return 1

    configure_logging(log_path=args.log)
    logger.info("---------- ap-install-prereqs start ----------")

    try:
        cfg = load_config(
            assume_yes=args.assume_yes,
            quiet=args.quiet,
            project_root=args.root,
            config_path=args.config,
        )
        ctx = ProvisionContext(config=cfg)
        result = run_pipeline(ctx=ctx, steps=build_steps())
    except (CommandError, FetchError, OSError, ValueError, RuntimeError):
        logger.exception("Provisioning failed")
        return 1

    logger.info("Ran steps: %s", ", ".join(result.ran_steps))
    logger.info("---------- ap-install-prereqs end ----------")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
