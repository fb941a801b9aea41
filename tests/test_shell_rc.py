"""Tests for shell startup file edits."""

import pytest

from ap_prereqs.lib.shell_rc import (
    append_line,
    append_line_once,
    apply_export_line,
    has_line,
    path_export_line,
    reset_file,
)


def test_has_line_missing_file(tmp_path):
    assert not has_line(tmp_path / ".profile", "export PATH=/x:$PATH")


def test_has_line_requires_exact_match(tmp_path):
    rc = tmp_path / ".profile"
    rc.write_text("# export PATH=/x:$PATH\nexport PATH=/x:$PATH \n")
    assert not has_line(rc, "export PATH=/x:$PATH")
    rc.write_text("export PATH=/x:$PATH\n")
    assert has_line(rc, "export PATH=/x:$PATH")


def test_append_line_once_is_idempotent(tmp_path):
    rc = tmp_path / ".bashrc"
    assert append_line_once(rc, "source ~/.ardupilot_env")
    assert not append_line_once(rc, "source ~/.ardupilot_env")
    assert rc.read_text() == "source ~/.ardupilot_env\n"


def test_append_line_adds_missing_newline(tmp_path):
    rc = tmp_path / ".profile"
    rc.write_text("alias ll='ls -l'")
    append_line(rc, "export PATH=/x:$PATH")
    assert rc.read_text().splitlines() == ["alias ll='ls -l'", "export PATH=/x:$PATH"]


def test_reset_file_truncates(tmp_path):
    env_file = tmp_path / ".ardupilot_env"
    env_file.write_text("old\n")
    reset_file(env_file, "# header")
    assert env_file.read_text() == "# header\n"


def test_path_export_lines():
    assert path_export_line("/opt/gcc/bin") == "export PATH=/opt/gcc/bin:$PATH"
    assert path_export_line("/src/ardupilot/Tools/autotest", quoted=True) == (
        'export PATH="/src/ardupilot/Tools/autotest:"$PATH'
    )


@pytest.mark.parametrize("quoted", [False, True])
def test_apply_export_line_prepends(quoted):
    env = apply_export_line(path_export_line("/opt/my dir/bin", quoted=quoted), {"PATH": "/usr/bin"})
    assert env["PATH"] == "/opt/my dir/bin:/usr/bin"


def test_apply_export_line_rejects_other_lines():
    with pytest.raises(ValueError):
        apply_export_line('source "/x/completion.bash"', {})
