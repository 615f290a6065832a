"""
npmaudit — entry point and orchestrator.

CLI flags, the remediation run, summary, exit status.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import click
import httpx
from rich.console import Console
from rich.markup import escape

from npmaudit import __version__
from npmaudit.config import RunConfig, load_config
from npmaudit.errors import NpmAuditError
from npmaudit.fixer.audit import check_if_audit_fixes_all, npm_audit_fix
from npmaudit.github import GitHubClient
from npmaudit.lockfile import check_snapshots, lock_has_changed, read_lockfile
from npmaudit.publisher import create_issue, make_pull_request
from npmaudit.ui.narrator import RunNarrator
from npmaudit.ui.theme import NPMAUDIT_THEME


# ── Console (shared across the tool) ─────────────────────────────────────────

_console = Console(theme=NPMAUDIT_THEME)


# ── Run result ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RunSummary:
    is_updated: bool
    fixed_all: bool
    pull_request_url: Optional[str] = None
    issue_url: Optional[str] = None


ClientFactory = Callable[[RunConfig], GitHubClient]


# ── Orchestrator ──────────────────────────────────────────────────────────────

def run(
    config: RunConfig,
    console: Console,
    client_factory: ClientFactory = GitHubClient.from_config,
) -> RunSummary:
    """
    One remediation run, strictly in order:

      read lock → npm audit fix → read lock → compare (publish is_updated)
        → [pull request if changed] → npm audit → [issue if not fully fixed]

    The two publishing branches are independent; a partial fix gets both a
    PR and an issue. Any exception aborts the run where it happens.
    The GitHub client is only built if one of the branches fires.
    """
    narrator = RunNarrator(console)
    narrator.print_run_header(config)

    client: Optional[GitHubClient] = None

    def github() -> GitHubClient:
        nonlocal client
        if client is None:
            client = client_factory(config)
        return client

    try:
        narrator.step("lockfile", "Reading package-lock.json")
        previous = read_lockfile(config.working_dir)
        narrator.outcome("pass", "package-lock.json", "snapshot taken")

        narrator.step("fix", "Running npm audit fix")
        npm_audit_fix(config, console)
        current = read_lockfile(config.working_dir)
        narrator.outcome("pass", "npm audit fix", "completed")

        narrator.step("compare", "Comparing package-lock.json")
        check_snapshots(previous, current)
        is_updated = lock_has_changed(previous, current, console=console)
        if is_updated:
            narrator.outcome("info", "package-lock.json", "changed by npm audit fix")
        else:
            narrator.outcome("skip", "package-lock.json", "unchanged, no pull request")

        pull_request_url = None
        if is_updated:
            narrator.step("pull_request", "Opening pull request")
            pull_request_url = make_pull_request(config, github(), console)
            narrator.outcome("pass", "Pull request", pull_request_url or "skipped (dry run)")

        narrator.step("verify", "Verifying with npm audit")
        fixed_all = check_if_audit_fixes_all(config, console)
        if fixed_all:
            narrator.outcome("pass", "npm audit", "found 0 vulnerabilities")
        else:
            narrator.outcome("warning", "npm audit", "vulnerabilities remain")

        issue_url = None
        if not fixed_all:
            narrator.step("issue", "Opening issue with the audit report")
            issue_url = create_issue(config, github(), console)
            narrator.outcome("pass", "Issue", issue_url or "skipped (dry run)")
    finally:
        if client is not None:
            client.close()

    summary = RunSummary(
        is_updated=is_updated,
        fixed_all=fixed_all,
        pull_request_url=pull_request_url,
        issue_url=issue_url,
    )
    narrator.print_summary(summary)
    return summary


# ── CLI ───────────────────────────────────────────────────────────────────────

@click.command(name="npmaudit", context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", prog_name="npmaudit")
@click.option(
    "--working-dir",
    metavar="DIR",
    default=None,
    help="Directory holding package.json (default: INPUT_WORKING-DIR or '.').",
)
@click.option("--github-user", default=None, help="Commit author name.")
@click.option("--github-email", default=None, help="Commit author email.")
@click.option(
    "--github-token",
    default=None,
    help="Token for the GitHub API (default: INPUT_GITHUB-TOKEN).",
)
@click.option(
    "--github-remote",
    default=None,
    help="Remote the fix branch is force-pushed to (default: origin).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Run npm and compare, but do not push, commit, or call the GitHub API for writes.",
)
def cli(
    working_dir: Optional[str],
    github_user: Optional[str],
    github_email: Optional[str],
    github_token: Optional[str],
    github_remote: Optional[str],
    dry_run: bool,
) -> None:
    """Run npm audit fix and report the result on GitHub.

    Opens a pull request on the npm-audit-fix branch when package-lock.json
    changes, and an issue with the npm audit report when vulnerabilities
    remain. Publishes the is_updated step output.

    \b
    Environment variables:
      INPUT_*            GitHub Actions inputs (working-dir, github-user, …)
      GITHUB_REPOSITORY  owner/repo to open the PR and issue on
      GITHUB_OUTPUT      file the is_updated output is appended to
      GITHUB_API_URL     API base URL (GitHub Enterprise)
    """
    config = load_config(
        working_dir=working_dir,
        github_user=github_user,
        github_email=github_email,
        github_token=github_token,
        github_remote=github_remote,
        dry_run=dry_run,
    )

    try:
        run(config, _console)
    except (NpmAuditError, httpx.HTTPError) as e:
        _console.print(f"[critical]Error:[/critical] {escape(str(e))}")
        raise SystemExit(1)


# ── Entry ─────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    cli()
