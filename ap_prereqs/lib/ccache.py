from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)

CCACHE_TARGET = "../../bin/ccache"


def link_compilers(
    ccache_dir: Path,
    compilers: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
) -> List[str]:
    """Create ccache masquerade links for compilers that lack one."""

    created: List[str] = []
    for name in compilers:
        link = Path(ccache_dir) / name
        if link.is_file() or link.is_symlink():
            continue
        run_cmd(["sudo", "ln", "-s", CCACHE_TARGET, str(link)], env=env)
        created.append(name)
    return created


def set_config(settings: Mapping[str, str], *, env: Mapping[str, str] | None = None) -> None:
    for key, value in settings.items():
        run_cmd(["ccache", "--set-config", f"{key}={value}"], env=env)
