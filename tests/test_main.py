"""
Tests for npmaudit/main.py — the orchestrator and the CLI.

Covers:
  - run():  PR iff lockfile changed, issue iff vulnerabilities remain,
            both in one run, neither, ordering, abort paths, client lifecycle
  - cli():  option → config plumbing, exit status on fatal errors, --version
"""

import json
from io import StringIO
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner
from rich.console import Console

from npmaudit.config import RunConfig
from npmaudit.errors import CommandError, GitHubAPIError, LockfileError, MissingLockDataError
from npmaudit.main import RunSummary, cli, run


# ── Helpers ───────────────────────────────────────────────────────────────────

def _console() -> Console:
    return Console(file=StringIO(), highlight=False, no_color=True, width=120)


def _config(tmp_path: Path) -> RunConfig:
    return RunConfig(working_dir=tmp_path, repository="acme/webapp")


class FakeNpm:
    """
    Stands in for the fixer.audit steps.

    npm_audit_fix rewrites package-lock.json to `after` (unless None);
    check_if_audit_fixes_all writes `report` and checks it for the marker.
    """

    def __init__(self, tmp_path: Path, before, after, report: str):
        self.tmp_path = tmp_path
        self.after = after
        self.report = report
        self.events: list[str] = []
        if before is not None:
            (tmp_path / "package-lock.json").write_text(json.dumps(before))

    def npm_audit_fix(self, config, console):
        self.events.append("fix")
        if self.after is not None:
            (self.tmp_path / "package-lock.json").write_text(json.dumps(self.after))

    def check_if_audit_fixes_all(self, config, console):
        self.events.append("verify")
        (self.tmp_path / "npm-audit-output.txt").write_text(self.report)
        return "found 0 vulnerabilities" in self.report


class _Harness:
    """Patches npm + publishers, runs the orchestrator, records what happened."""

    def __init__(self, tmp_path, before, after, report):
        self.tmp_path = tmp_path
        self.console = _console()
        self.npm = FakeNpm(tmp_path, before, after, report)
        self.client = MagicMock()
        self.factory = MagicMock(return_value=self.client)
        self.make_pull_request = MagicMock(
            side_effect=lambda *a: self.npm.events.append("pr") or "https://github.com/acme/webapp/pull/1"
        )
        self.create_issue = MagicMock(
            side_effect=lambda *a: self.npm.events.append("issue") or "https://github.com/acme/webapp/issues/1"
        )

    def run(self) -> RunSummary:
        with patch("npmaudit.main.npm_audit_fix", side_effect=self.npm.npm_audit_fix), \
             patch("npmaudit.main.check_if_audit_fixes_all", side_effect=self.npm.check_if_audit_fixes_all), \
             patch("npmaudit.main.make_pull_request", self.make_pull_request), \
             patch("npmaudit.main.create_issue", self.create_issue):
            return run(_config(self.tmp_path), self.console, client_factory=self.factory)


# ── Branching ─────────────────────────────────────────────────────────────────

class TestBranching:
    def test_changed_and_vulnerable_opens_pr_and_issue(self, tmp_path, output_file):
        h = _Harness(tmp_path, {"a": "1.0.0"}, {"a": "1.0.1"}, "found 3 vulnerabilities\n")
        summary = h.run()

        assert summary.is_updated is True
        assert summary.fixed_all is False
        h.make_pull_request.assert_called_once()
        h.create_issue.assert_called_once()
        assert output_file.read_text() == "is_updated=true\n"

    def test_unchanged_and_clean_does_nothing(self, tmp_path, output_file):
        h = _Harness(tmp_path, {"a": "1.0.0"}, {"a": "1.0.0"}, "found 0 vulnerabilities\n")
        summary = h.run()

        assert summary == RunSummary(is_updated=False, fixed_all=True)
        h.make_pull_request.assert_not_called()
        h.create_issue.assert_not_called()
        h.factory.assert_not_called()
        assert output_file.read_text() == "is_updated=false\n"

    def test_changed_and_clean_opens_only_pr(self, tmp_path):
        h = _Harness(tmp_path, {"a": "1.0.0"}, {"a": "1.0.1"}, "found 0 vulnerabilities\n")
        summary = h.run()

        assert summary.pull_request_url == "https://github.com/acme/webapp/pull/1"
        assert summary.issue_url is None
        h.make_pull_request.assert_called_once()
        h.create_issue.assert_not_called()

    def test_unchanged_and_vulnerable_opens_only_issue(self, tmp_path):
        h = _Harness(tmp_path, {"a": "1.0.0"}, {"a": "1.0.0"}, "found 2 vulnerabilities\n")
        summary = h.run()

        assert summary.issue_url == "https://github.com/acme/webapp/issues/1"
        h.make_pull_request.assert_not_called()
        h.create_issue.assert_called_once()

    def test_reordered_lockfile_is_not_a_change(self, tmp_path):
        h = _Harness(
            tmp_path,
            {"name": "app", "version": "1.0.0"},
            {"version": "1.0.0", "name": "app"},
            "found 0 vulnerabilities\n",
        )
        assert h.run().is_updated is False
        h.make_pull_request.assert_not_called()

    def test_empty_lockfile_filled_by_install_opens_pr(self, tmp_path, output_file):
        (tmp_path / "package-lock.json").write_text("")
        h = _Harness(tmp_path, None, {"a": "1.0.1"}, "found 0 vulnerabilities\n")
        summary = h.run()

        assert summary.is_updated is True
        h.make_pull_request.assert_called_once()
        assert output_file.read_text() == "is_updated=true\n"


# ── Ordering & lifecycle ──────────────────────────────────────────────────────

class TestOrdering:
    def test_strict_order(self, tmp_path):
        h = _Harness(tmp_path, {"a": "1"}, {"a": "2"}, "found 1 vulnerability\n")
        h.run()
        assert h.npm.events == ["fix", "pr", "verify", "issue"]

    def test_is_updated_published_before_pr(self, tmp_path, output_file):
        h = _Harness(tmp_path, {"a": "1"}, {"a": "2"}, "found 0 vulnerabilities\n")
        seen = []
        h.make_pull_request.side_effect = lambda *a: seen.append(output_file.read_text())
        h.run()
        assert seen == ["is_updated=true\n"]

    def test_one_client_shared_and_closed(self, tmp_path):
        h = _Harness(tmp_path, {"a": "1"}, {"a": "2"}, "found 1 vulnerability\n")
        h.run()
        h.factory.assert_called_once()
        assert h.make_pull_request.call_args.args[1] is h.client
        assert h.create_issue.call_args.args[1] is h.client
        h.client.close.assert_called_once()

    def test_narration_goes_to_the_given_console(self, tmp_path):
        h = _Harness(tmp_path, {"a": "1"}, {"a": "1"}, "found 0 vulnerabilities\n")
        with patch("npmaudit.main._console") as shared:
            h.run()
        shared.print.assert_not_called()
        assert "package-lock.json unchanged" in h.console.file.getvalue()


# ── Abort paths ───────────────────────────────────────────────────────────────

class TestAbort:
    def test_missing_lockfile_aborts_before_anything(self, tmp_path):
        h = _Harness(tmp_path, None, {"a": "1"}, "found 0 vulnerabilities\n")
        with pytest.raises(LockfileError):
            h.run()
        assert h.npm.events == []
        h.make_pull_request.assert_not_called()
        h.create_issue.assert_not_called()

    def test_empty_lockfile_raises_missing_lock_data(self, tmp_path, output_file):
        (tmp_path / "package-lock.json").write_text("")
        h = _Harness(tmp_path, None, None, "found 0 vulnerabilities\n")
        with pytest.raises(MissingLockDataError):
            h.run()
        assert not output_file.exists()

    def test_fix_failure_aborts(self, tmp_path):
        h = _Harness(tmp_path, {"a": "1"}, {"a": "2"}, "")
        with patch("npmaudit.main.npm_audit_fix", side_effect=CommandError(["npm", "install"], 1)), \
             patch("npmaudit.main.make_pull_request", h.make_pull_request), \
             patch("npmaudit.main.create_issue", h.create_issue):
            with pytest.raises(CommandError):
                run(_config(tmp_path), _console(), client_factory=h.factory)
        h.make_pull_request.assert_not_called()

    def test_pr_failure_skips_verify_and_closes_client(self, tmp_path):
        h = _Harness(tmp_path, {"a": "1"}, {"a": "2"}, "found 1 vulnerability\n")
        h.make_pull_request.side_effect = GitHubAPIError("POST", "/pulls", 422)
        with pytest.raises(GitHubAPIError):
            h.run()
        assert "verify" not in h.npm.events
        h.client.close.assert_called_once()


# ── CLI ───────────────────────────────────────────────────────────────────────

class TestCli:
    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "npmaudit" in result.output

    def test_options_reach_config(self, tmp_path):
        with patch("npmaudit.main.run") as mock_run:
            result = CliRunner().invoke(
                cli,
                ["--working-dir", str(tmp_path), "--github-user", "Bot", "--github-remote", "fork", "--dry-run"],
            )
        assert result.exit_code == 0
        config = mock_run.call_args.args[0]
        assert config.working_dir == tmp_path
        assert config.github_user == "Bot"
        assert config.github_remote == "fork"
        assert config.dry_run is True

    def test_action_inputs_used_without_flags(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INPUT_WORKING-DIR", str(tmp_path))
        monkeypatch.setenv("INPUT_GITHUB-TOKEN", "secret")
        with patch("npmaudit.main.run") as mock_run:
            result = CliRunner().invoke(cli, [])
        assert result.exit_code == 0
        config = mock_run.call_args.args[0]
        assert config.working_dir == tmp_path
        assert config.github_token == "secret"
        assert config.github_remote == "origin"

    def test_fatal_error_exits_1_with_message(self):
        with patch("npmaudit.main.run", side_effect=LockfileError("Cannot read package-lock.json")):
            result = CliRunner().invoke(cli, [])
        assert result.exit_code == 1
        assert "Cannot read package-lock.json" in result.output

    def test_missing_lockfile_end_to_end(self, tmp_path):
        result = CliRunner().invoke(cli, ["--working-dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "Error:" in result.output
