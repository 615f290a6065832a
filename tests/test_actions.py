"""
Tests for npmaudit/actions.py — GitHub Actions inputs and outputs.
"""

from io import StringIO

import pytest
from rich.console import Console

from npmaudit.actions import get_input, parse_repository, set_output
from npmaudit.errors import ConfigError


class TestGetInput:
    def test_reads_dashed_name(self):
        assert get_input("working-dir", env={"INPUT_WORKING-DIR": "app"}) == "app"

    def test_spaces_become_underscores(self):
        assert get_input("my input", env={"INPUT_MY_INPUT": "x"}) == "x"

    def test_value_is_trimmed(self):
        assert get_input("github-user", env={"INPUT_GITHUB-USER": "  bot \n"}) == "bot"

    def test_default_when_missing(self):
        assert get_input("github-remote", "origin", env={}) == "origin"

    def test_reads_process_env(self, monkeypatch):
        monkeypatch.setenv("INPUT_GITHUB-EMAIL", "bot@example.com")
        assert get_input("github-email") == "bot@example.com"


class TestSetOutput:
    def test_bool_true(self, output_file):
        set_output("is_updated", True)
        assert output_file.read_text() == "is_updated=true\n"

    def test_bool_false(self, output_file):
        set_output("is_updated", False)
        assert output_file.read_text() == "is_updated=false\n"

    def test_appends(self, output_file):
        output_file.write_text("previous=1\n")
        set_output("is_updated", True)
        assert output_file.read_text() == "previous=1\nis_updated=true\n"

    def test_multiline_uses_delimiter(self, output_file):
        set_output("report", "line one\nline two")
        text = output_file.read_text()
        header, body = text.split("\n", 1)
        name, delimiter = header.split("<<")
        assert name == "report"
        assert body == f"line one\nline two\n{delimiter}\n"

    def test_without_output_file_prints_to_console(self):
        buf = StringIO()
        set_output("is_updated", True, env={}, console=Console(file=buf, no_color=True))
        assert buf.getvalue() == "  is_updated=true\n"

    def test_without_output_file_never_emits_workflow_command(self, capsys):
        set_output("is_updated", True, env={})
        out = capsys.readouterr().out
        assert "::set-output" not in out
        assert "is_updated=true" in out


class TestRepoContext:
    def test_parses_owner_and_repo(self):
        assert parse_repository("acme/webapp") == ("acme", "webapp")

    @pytest.mark.parametrize("value", ["", "acme", "/webapp", "acme/", "a/b/c"])
    def test_malformed_repository(self, value):
        with pytest.raises(ConfigError):
            parse_repository(value)
