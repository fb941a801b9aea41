"""Shared fixtures for step tests."""

import pytest

from ap_prereqs.config import load_config
from ap_prereqs.pipeline import ProvisionContext


class Prompter:
    """Scripted answers keyed by question prefix; records what was asked."""

    def __init__(self, answers=None, default="n"):
        self.answers = answers or {}
        self.default = default
        self.asked = []

    def __call__(self, question):
        self.asked.append(question)
        for prefix, answer in self.answers.items():
            if question.startswith(prefix):
                return answer
        return self.default


@pytest.fixture
def make_ctx(tmp_path, monkeypatch):
    monkeypatch.setattr("ap_prereqs.config.is_container", lambda env: env.get("AP_DOCKER_BUILD") == "1")

    def _make(environ=None, prompter=None, **kwargs):
        env = {"USER": "dev", "PATH": "/usr/bin"}
        env.update(environ or {})
        root = tmp_path / "ardupilot"
        root.mkdir(exist_ok=True)
        cfg = load_config(environ=env, home=tmp_path / "home", project_root=str(root), **kwargs)
        return ProvisionContext(config=cfg, env=dict(env), prompt=prompter or Prompter())

    return _make
