from __future__ import annotations

import logging
from typing import Mapping, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


def dnf_install(
    packages: Sequence[str],
    *,
    assume_yes: bool = False,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> None:
    if not packages:
        return
    argv = ["sudo", "dnf", "install"]
    if assume_yes:
        argv.append("-y")
    if quiet:
        argv.append("-q")
    # Not captured: without -y dnf asks for confirmation on the terminal.
    run_cmd([*argv, *packages], env=env, capture=False)


def dnf_remove(package: str, *, env: Mapping[str, str] | None = None) -> None:
    run_cmd(["sudo", "dnf", "remove", "-y", package], env=env, capture=False)


def package_is_installed(package: str, *, env: Mapping[str, str] | None = None) -> bool:
    """Return True if rpm knows the package as installed."""
    r = run_cmd(["rpm", "-q", package], check=False, env=env)
    return r.returncode == 0


def add_user_to_group(user: str, group: str, *, env: Mapping[str, str] | None = None) -> None:
    run_cmd(["sudo", "usermod", "-a", "-G", group, user], env=env)
