from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

LOG_NAME = "install-prereqs.log"
DEFAULT_LOG_PATH = str(Path.home() / ".cache" / "ardupilot-prereqs" / LOG_NAME)

SEP = "#" * 46

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def _open_log_file(requested: str) -> Tuple[logging.FileHandler, str]:
    """Open the requested log file, or LOG_NAME in the cwd if that fails."""

    try:
        Path(requested).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(requested), requested
    except OSError:
        fallback = str(Path.cwd() / LOG_NAME)
        return logging.FileHandler(fallback), fallback


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Send every command echo, decision and heading to the log file and console.

    Returns the log file actually in use. Calling it again is a no-op.
    """

    root = logging.getLogger()
    root.setLevel(level)

    if getattr(root, "_ap_prereqs_configured", False):
        return getattr(root, "_ap_prereqs_log_path", log_path)

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    file_handler, chosen_path = _open_log_file(log_path)
    handlers: list[logging.Handler] = [file_handler]
    if also_console:
        handlers.append(logging.StreamHandler())

    for h in handlers:
        h.setFormatter(fmt)
        root.addHandler(h)

    setattr(root, "_ap_prereqs_configured", True)
    setattr(root, "_ap_prereqs_log_path", chosen_path)

    if chosen_path != log_path:
        logging.getLogger(__name__).warning("Cannot write %s; logging to %s", log_path, chosen_path)
    else:
        logging.getLogger(__name__).info("Logging to %s", chosen_path)
    return chosen_path


def heading(title: str, log: Optional[logging.Logger] = None) -> None:
    """Banner printed at the start of each step."""
    log = log or logging.getLogger(__name__)
    log.info(SEP)
    log.info(title)
    log.info(SEP)
