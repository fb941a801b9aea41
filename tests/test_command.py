"""Tests for the command runner."""

import logging
import sys

import pytest

from ap_prereqs.lib.command import CommandError, fmt_argv, run_cmd


def test_run_cmd_captures_output_and_logs(caplog):
    with caplog.at_level(logging.INFO, logger="ap_prereqs.lib.command"):
        r = run_cmd([sys.executable, "-c", "print('hello')"])
    assert r.returncode == 0
    assert r.stdout.strip() == "hello"
    assert any(rec.getMessage().startswith("CMD ") for rec in caplog.records)


def test_run_cmd_raises_with_stderr():
    with pytest.raises(CommandError) as excinfo:
        run_cmd([sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"])
    assert excinfo.value.returncode == 3
    assert "boom" in str(excinfo.value)


def test_run_cmd_check_false_returns_result():
    r = run_cmd([sys.executable, "-c", "import sys; sys.exit(1)"], check=False)
    assert r.returncode == 1


def test_run_cmd_uses_given_env():
    r = run_cmd([sys.executable, "-c", "import os; print(os.environ.get('AP_TEST_VAR', ''))"], env={"AP_TEST_VAR": "42"})
    assert r.stdout.strip() == "42"


def test_fmt_argv_quotes():
    assert fmt_argv(["echo", "a b"]) == "echo 'a b'"
