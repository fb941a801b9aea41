from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


def venv_python(venv_dir: Path) -> Path:
    return Path(venv_dir) / "bin" / "python"


def activate_line(venv_dir: Path) -> str:
    return f"source {Path(venv_dir) / 'bin' / 'activate'}"


def create_venv(
    venv_dir: Path,
    *,
    python: str = "python3",
    system_site_packages: bool = True,
    env: Mapping[str, str] | None = None,
) -> None:
    argv = [python, "-m", "venv"]
    if system_site_packages:
        argv.append("--system-site-packages")
    argv.append(str(venv_dir))
    run_cmd(argv, env=env)


def activated_env(venv_dir: Path, env: Mapping[str, str]) -> Dict[str, str]:
    """Environment equivalent to sourcing the venv's activate script."""
    out = dict(env)
    out["VIRTUAL_ENV"] = str(venv_dir)
    out["PATH"] = os.pathsep.join([str(Path(venv_dir) / "bin"), env.get("PATH", "")]).rstrip(os.pathsep)
    out.pop("PYTHONHOME", None)
    return out


def pip_install(
    python: str,
    packages: Sequence[str],
    *,
    upgrade: bool = True,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> None:
    if not packages:
        return
    argv = [python, "-m", "pip"]
    if quiet:
        argv.append("-q")
    argv.append("install")
    if upgrade:
        argv.append("-U")
    run_cmd([*argv, *packages], env=env, capture=False)
