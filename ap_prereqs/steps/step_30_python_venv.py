from __future__ import annotations

import logging

from ..lib.pyenv import activate_line, activated_env, create_venv, venv_python
from ..lib.shell_rc import append_line_once, reset_file
from ..logging_utils import heading
from ..pipeline import ProvisionContext

logger = logging.getLogger(__name__)

CONTAINER_ENV_HEADER = "# ArduPilot env file. Need to be loaded by your Shell."


class PythonVenvStep:
    step_id = "30_python_venv"

    def run(self, ctx: ProvisionContext) -> None:
        cfg = ctx.config

        if cfg.is_container:
            logger.info("Inside a container, tool paths go into %s", cfg.shell_login)
            reset_file(cfg.shell_login, CONTAINER_ENV_HEADER)

        heading("Setting up Python virtual environment", logger)
        create_venv(cfg.venv, python=cfg.system_python, env=ctx.env)

        ctx.env = activated_env(cfg.venv, ctx.env)
        ctx.python = str(venv_python(cfg.venv))

        source_line = activate_line(cfg.venv)
        decision = ctx.decide(
            "python_venv",
            "Make ArduPilot venv default for python [N/y]?",
            env_var="DO_PYTHON_VENV_ENV",
        )
        if decision.accepted:
            append_line_once(cfg.shell_login, source_line)
        else:
            logger.info("Please use `%s` to activate the ArduPilot venv", source_line)
        logger.info("Done!")
