"""Tests for Exec splitting, field codes and launching."""

from __future__ import annotations

from pathlib import Path

import pytest

from deskopen.core.command import (
    CommandLine,
    build_command,
    expand_field_codes,
    launch,
    split_exec,
)
from deskopen.core.desktop import ApplicationDescriptor
from deskopen.core.errors import ActionFailed
from deskopen.core.target import Target

LOCAL = Target(path="/tmp/a.png")
URL = Target(uri="https://example.com")


class TestSplitExec:
    def test_whitespace(self):
        assert split_exec("app  --flag\t%f") == ["app", "--flag", "%f"]

    def test_backslash_escapes_space(self):
        assert split_exec(r"/opt/My\ App/bin %u") == ["/opt/My App/bin", "%u"]

    def test_backslash_escapes_backslash(self):
        assert split_exec(r"app a\\b") == ["app", r"a\b"]

    def test_quotes_are_literal(self):
        assert split_exec('app "a b"') == ["app", '"a', 'b"']

    def test_empty(self):
        assert split_exec("") == []
        assert split_exec("   ") == []

    def test_trailing_backslash_dropped(self):
        assert split_exec("app \\") == ["app"]


class TestExpandFieldCodes:
    def test_file_and_icon(self):
        out = expand_field_codes(["--flag", "%f", "%i"], LOCAL, icon="ico")
        assert out == ["--flag", "/tmp/a.png", "--icon", "ico"]

    def test_no_codes_appends_target(self):
        assert expand_field_codes(["--new-window"], LOCAL) == ["--new-window", "/tmp/a.png"]

    def test_no_codes_appends_uri(self):
        assert expand_field_codes([], URL) == ["https://example.com"]

    @pytest.mark.parametrize("code", ["%f", "%F"])
    def test_file_code_aborts_for_uri(self, code):
        assert expand_field_codes([code], URL) is None

    @pytest.mark.parametrize("code", ["%u", "%U"])
    def test_url_code_prefers_uri(self, code):
        assert expand_field_codes([code], URL) == ["https://example.com"]
        assert expand_field_codes([code], LOCAL) == ["/tmp/a.png"]

    def test_name(self):
        assert expand_field_codes(["--title", "%c", "%f"], LOCAL, name="Viewer") == [
            "--title",
            "Viewer",
            "/tmp/a.png",
        ]

    def test_name_only_counts_as_replaced(self):
        assert expand_field_codes(["%c"], LOCAL, name="Viewer") == ["Viewer"]

    def test_empty_icon(self):
        assert expand_field_codes(["%i", "%f"], LOCAL) == ["--icon", "", "/tmp/a.png"]

    def test_unknown_codes_pass_through(self):
        assert expand_field_codes(["%k", "%d", "50%"], LOCAL) == ["%k", "%d", "50%", "/tmp/a.png"]

    def test_embedded_code_not_substituted(self):
        assert expand_field_codes(["--file=%f"], LOCAL) == ["--file=%f", "/tmp/a.png"]

    def test_input_not_mutated(self):
        tokens = ["%f", "%i"]
        expand_field_codes(tokens, LOCAL, icon="x")
        assert tokens == ["%f", "%i"]


class TestBuildCommand:
    def descriptor(self, exec_line, **kwargs):
        return ApplicationDescriptor(path=Path("/x/app.desktop"), exec=exec_line, **kwargs)

    def test_builds(self):
        cmd = build_command(self.descriptor("app --flag %f %i", icon="ico"), LOCAL, "/bin/app")
        assert cmd == CommandLine("/bin/app", "app", ("--flag", "/tmp/a.png", "--icon", "ico"))
        assert cmd.argv == ["app", "--flag", "/tmp/a.png", "--icon", "ico"]

    def test_aborts(self):
        assert build_command(self.descriptor("app %F"), URL, "/bin/app") is None


class TestLaunch:
    def test_execs(self, exec_calls):
        launch(CommandLine("/bin/app", "app", ("x",)))
        assert exec_calls == [("/bin/app", ["app", "x"])]

    def test_exec_failure_is_action_failed(self, monkeypatch):
        def _fail(path, argv):
            raise OSError(8, "Exec format error")

        monkeypatch.setattr("deskopen.core.command.os.execv", _fail)
        with pytest.raises(ActionFailed) as exc:
            launch(CommandLine("/bin/app", "app"))
        assert exc.value.exit_code == 4
