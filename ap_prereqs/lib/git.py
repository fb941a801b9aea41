from __future__ import annotations

from pathlib import Path
from typing import Mapping

from .command import run_cmd


def is_git_checkout(root: Path) -> bool:
    return (Path(root) / ".git").is_dir()


def update_submodules(root: Path, *, env: Mapping[str, str] | None = None) -> None:
    run_cmd(["git", "submodule", "update", "--init", "--recursive"], cwd=str(root), env=env, capture=False)
