"""Tests for the provisioning steps, with every external command recorded instead of run."""

import dataclasses

import pytest

from ap_prereqs.lib.command import CmdResult
from ap_prereqs.steps import (
    BasePackagesStep,
    CcacheStep,
    DialoutGroupStep,
    FinalizeStep,
    GitSubmodulesStep,
    PythonPackagesStep,
    PythonVenvStep,
    RemoveConflictingPackagesStep,
    ShellEnvStep,
    arm_none_eabi_step,
)
from ap_prereqs.steps import step_60_toolchains

from .conftest import Prompter


@pytest.fixture
def commands(monkeypatch):
    calls = []
    installed = set()

    def fake_run_cmd(argv, *, check=True, env=None, cwd=None, input_text=None, capture=True):
        argv = [str(a) for a in argv]
        calls.append(argv)
        rc = 0
        if argv[:2] == ["rpm", "-q"]:
            rc = 0 if argv[2] in installed else 1
        return CmdResult(argv=argv, returncode=rc, stdout="", stderr="")

    for mod in ("pkg", "pyenv", "ccache", "git"):
        monkeypatch.setattr(f"ap_prereqs.lib.{mod}.run_cmd", fake_run_cmd)
    fake_run_cmd.installed = installed
    fake_run_cmd.calls = calls
    return fake_run_cmd


def test_dialout_group(make_ctx, commands):
    DialoutGroupStep().run(make_ctx())
    assert commands.calls == [["sudo", "usermod", "-a", "-G", "dialout", "dev"]]


def test_base_packages_flags(make_ctx, commands):
    ctx = make_ctx(assume_yes=True, quiet=True)
    BasePackagesStep().run(ctx)
    argv = commands.calls[0]
    assert argv[:5] == ["sudo", "dnf", "install", "-y", "-q"]
    assert "ccache" in argv


def test_base_packages_interactive(make_ctx, commands):
    BasePackagesStep().run(make_ctx())
    assert commands.calls[0][:4] == ["sudo", "dnf", "install", "@development-tools"]


def test_venv_declined_does_not_touch_profile(make_ctx, commands):
    ctx = make_ctx()
    PythonVenvStep().run(ctx)
    venv = ctx.config.venv
    assert commands.calls == [["python3", "-m", "venv", "--system-site-packages", str(venv)]]
    assert ctx.python == str(venv / "bin" / "python")
    assert ctx.env["VIRTUAL_ENV"] == str(venv)
    assert ctx.env["PATH"].startswith(str(venv / "bin"))
    assert not ctx.config.shell_login.exists()


def test_venv_env_override_appends_once(make_ctx, commands):
    for _ in range(2):
        ctx = make_ctx({"DO_PYTHON_VENV_ENV": "1"})
        PythonVenvStep().run(ctx)
    lines = ctx.config.shell_login.read_text().splitlines()
    assert lines == [f"source {ctx.config.venv / 'bin' / 'activate'}"]


def test_venv_in_container_resets_env_file(make_ctx, commands):
    ctx = make_ctx({"AP_DOCKER_BUILD": "1"}, assume_yes=True)
    ctx.config.shell_login.parent.mkdir(parents=True)
    ctx.config.shell_login.write_text("stale\n")
    PythonVenvStep().run(ctx)
    lines = ctx.config.shell_login.read_text().splitlines()
    assert lines[0] == "# ArduPilot env file. Need to be loaded by your Shell."
    assert "stale" not in lines
    assert lines[1].startswith("source ")


def test_python_packages_one_by_one(make_ctx, commands):
    ctx = make_ctx(quiet=True)
    ctx.python = "/venv/bin/python"
    PythonPackagesStep().run(ctx)
    assert commands.calls[0] == ["/venv/bin/python", "-m", "pip", "-q", "install", "-U", "pip", "packaging", "setuptools", "wheel"]
    assert commands.calls[1] == ["/venv/bin/python", "-m", "pip", "-q", "install", "-U", "attrdict3"]
    singles = [c[-1] for c in commands.calls[2:]]
    assert singles == ctx.config.python_packages


def test_ccache_links_only_missing(make_ctx, commands, tmp_path, monkeypatch):
    ccache_dir = tmp_path / "ccache"
    ccache_dir.mkdir()
    (ccache_dir / "arm-none-eabi-gcc").symlink_to("../../bin/ccache")
    ctx = make_ctx()
    ctx.config = dataclasses.replace(ctx.config, ccache_dir=ccache_dir)
    CcacheStep().run(ctx)
    links = [c for c in commands.calls if c[:3] == ["sudo", "ln", "-s"]]
    assert [c[-1] for c in links] == [
        str(ccache_dir / "arm-none-eabi-g++"),
        str(ccache_dir / "arm-linux-gnueabihf-g++"),
        str(ccache_dir / "arm-linux-gnueabihf-gcc"),
    ]
    assert ["ccache", "--set-config", "sloppiness=file_macro,locale,time_macros"] in commands.calls


def test_remove_conflicting_only_installed(make_ctx, commands):
    commands.installed.add("brltty")
    RemoveConflictingPackagesStep().run(make_ctx())
    assert ["sudo", "dnf", "remove", "-y", "brltty"] in commands.calls
    assert ["sudo", "dnf", "remove", "-y", "ModemManager"] not in commands.calls


def test_toolchain_step_declined(make_ctx, monkeypatch):
    monkeypatch.setattr(step_60_toolchains, "ensure_installed", lambda *a, **k: pytest.fail("should not install"))
    ctx = make_ctx(prompter=Prompter(default="n"))
    arm_none_eabi_step().run(ctx)
    assert not ctx.accepted("arm_none_eabi")


def test_toolchain_step_env_accepts(make_ctx, monkeypatch):
    seen = []
    monkeypatch.setattr(step_60_toolchains, "ensure_installed", lambda art, **k: seen.append((art, k)) or True)
    ctx = make_ctx({"DO_AP_STM_ENV": "1"}, prompter=Prompter(default="n"))
    arm_none_eabi_step().run(ctx)
    assert ctx.prompt.asked == []
    art, kwargs = seen[0]
    assert art.marker_name == "gcc-arm-none-eabi-10-2020-q4-major"
    assert kwargs["allow_sudo"] is True
    assert kwargs["verify_download"] is True


def test_shell_env_appends_and_applies(make_ctx):
    ctx = make_ctx({"DO_AP_STM_ENV": "1"}, assume_yes=True)
    ctx.decide("arm_none_eabi", "Install ArduPilot STM32 toolchain [N/y]?", env_var="DO_AP_STM_ENV")
    ShellEnvStep().run(ctx)

    cfg = ctx.config
    arm_bin = cfg.toolchain("arm_none_eabi").bin_dir
    profile = cfg.shell_login.read_text().splitlines()
    assert profile == [
        f"export PATH={arm_bin}:$PATH",
        f'export PATH="{cfg.autotest_dir}:"$PATH',
        f"export PATH={cfg.ccache_dir}:$PATH",
    ]
    assert cfg.bashrc.read_text().splitlines() == [f'source "{cfg.completion_script}"']
    assert ctx.env["PATH"].split(":")[:3] == [str(cfg.ccache_dir), str(cfg.autotest_dir), str(arm_bin)]


def test_shell_env_rerun_asks_nothing(make_ctx):
    ShellEnvStep().run(make_ctx(assume_yes=True))
    prompter = Prompter(default="y")
    ctx = make_ctx(prompter=prompter)
    ShellEnvStep().run(ctx)
    assert prompter.asked == []
    assert len(ctx.config.shell_login.read_text().splitlines()) == 2


def test_shell_env_declined_and_completion_skipped(make_ctx):
    prompter = Prompter(default="n")
    ctx = make_ctx({"SKIP_AP_COMPLETION_ENV": "1"}, prompter=prompter)
    ShellEnvStep().run(ctx)
    assert not ctx.config.shell_login.exists()
    assert not ctx.config.bashrc.exists()
    assert not any("Completion" in q for q in prompter.asked)
    assert len(prompter.asked) == 2


def test_git_submodules(make_ctx, commands):
    ctx = make_ctx()
    (ctx.config.project_root / ".git").mkdir()
    GitSubmodulesStep().run(ctx)
    assert commands.calls == [["git", "submodule", "update", "--init", "--recursive"]]


def test_git_submodules_skipped(make_ctx, commands):
    ctx = make_ctx({"SKIP_AP_GIT_CHECK": "1"})
    (ctx.config.project_root / ".git").mkdir()
    GitSubmodulesStep().run(ctx)
    assert commands.calls == []


def test_git_submodules_not_a_checkout(make_ctx, commands):
    GitSubmodulesStep().run(make_ctx())
    assert commands.calls == []


def test_finalize_container(make_ctx):
    ctx = make_ctx({"AP_DOCKER_BUILD": "1"})
    FinalizeStep().run(ctx)
    FinalizeStep().run(ctx)
    assert ctx.config.bashrc.read_text() == "source ~/.ardupilot_env\n"


def test_finalize_host(make_ctx):
    ctx = make_ctx()
    FinalizeStep().run(ctx)
    assert not ctx.config.bashrc.exists()
