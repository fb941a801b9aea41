from __future__ import annotations

import re
from pathlib import Path
from typing import Mapping

_CGROUP_RE = re.compile(r"(lxc|docker)")


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return ""


def is_container(
    environ: Mapping[str, str],
    *,
    dockerenv: Path = Path("/.dockerenv"),
    cgroup: Path = Path("/proc/1/cgroup"),
) -> bool:
    """True inside docker/lxc, or when AP_DOCKER_BUILD=1 says so."""

    if environ.get("AP_DOCKER_BUILD", "0").strip() == "1":
        return True
    if dockerenv.is_file():
        return True
    return bool(_CGROUP_RE.search(_read_text(cgroup)))
