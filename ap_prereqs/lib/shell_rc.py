"""Append-only edits of shell startup files."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Dict, Mapping

logger = logging.getLogger(__name__)

_PATH_PREPEND = re.compile(r'^export PATH="?(?P<dir>[^"]*?):?"?\$PATH$')


def has_line(path: Path, line: str) -> bool:
    """Exact whole-line match; a missing file has no lines."""
    p = Path(path)
    if not p.is_file():
        return False
    with p.open(encoding="utf-8", errors="replace") as f:
        return any(existing.rstrip("\n") == line for existing in f)


def append_line(path: Path, line: str) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    needs_newline = p.is_file() and p.stat().st_size > 0 and not p.read_bytes().endswith(b"\n")
    with p.open("a", encoding="utf-8") as f:
        if needs_newline:
            f.write("\n")
        f.write(line + "\n")
    logger.info("Appended to %s: %s", p, line)


def append_line_once(path: Path, line: str) -> bool:
    if has_line(path, line):
        return False
    append_line(path, line)
    return True


def reset_file(path: Path, header: str) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(header + "\n", encoding="utf-8")


def path_export_line(directory: str | Path, *, quoted: bool = False) -> str:
    if quoted:
        return f'export PATH="{directory}:"$PATH'
    return f"export PATH={directory}:$PATH"


def apply_export_line(line: str, env: Mapping[str, str]) -> Dict[str, str]:
    """Apply a PATH export line produced by path_export_line to env."""
    m = _PATH_PREPEND.match(line)
    if not m:
        raise ValueError(f"Not a PATH prepend line: {line!r}")
    out = dict(env)
    current = env.get("PATH", "")
    out["PATH"] = m.group("dir") + (os.pathsep + current if current else "")
    return out
