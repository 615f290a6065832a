"""
Publishing the outcome of a run.

configure_git      — set the commit identity (git config --global)
make_pull_request  — commit the fix to npm-audit-fix, force-push, open a PR
create_issue       — open an issue carrying the remaining audit report

Each step is fatal on failure and nothing is rolled back. The fix branch
name is fixed, so a re-run force-pushes over any unmerged earlier attempt
instead of opening a second branch.
"""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape

from npmaudit.config import RunConfig
from npmaudit.fixer.audit import read_audit_report
from npmaudit.fixer.executor import run_command
from npmaudit.github import GitHubClient


# ── Constants ─────────────────────────────────────────────────────────────────

FIX_BRANCH = "npm-audit-fix"
COMMIT_MESSAGE = "npm audit fix attempted"

PR_TITLE = "npm audit fixed!"
PR_BODY = (
    "npm modules have been audited and fix have been attempted "
    "to the concerned packages."
)

ISSUE_TITLE = "npm audit fix failed"
ISSUE_BODY_PREFIX = (
    "Attempt to auto fix npm vulnerabilities via `npm audit fix` was not "
    "100% successful. The following is the report \n\r"
)


# ── Git identity ──────────────────────────────────────────────────────────────

def configure_git(config: RunConfig, console: Console) -> None:
    """Set user.name / user.email globally. Safe to call more than once."""
    console.print("  [dim]configuring git settings…[/dim]")

    if config.dry_run:
        _would(console, f"git config --global user.name {config.github_user!r}")
        _would(console, f"git config --global user.email {config.github_email!r}")
        return

    run_command(["git", "config", "--global", "user.name", config.github_user], console)
    run_command(["git", "config", "--global", "user.email", config.github_email], console)


# ── Pull request ──────────────────────────────────────────────────────────────

def make_pull_request(
    config: RunConfig, client: GitHubClient, console: Console
) -> Optional[str]:
    """
    Push the working-dir changes to FIX_BRANCH and open a PR against the default branch.

    Returns the PR's html_url, or None on a dry run.
    """
    repo = client.get_repository()
    default_branch = repo["default_branch"]

    configure_git(config, console)

    console.print("  [dim]making pull request on changes…[/dim]")

    git_steps = [
        ["git", "checkout", "-B", FIX_BRANCH],
        ["git", "status"],
        ["git", "add", "-A"],
        ["git", "commit", "-m", COMMIT_MESSAGE],
        ["git", "push", "--force", config.github_remote, FIX_BRANCH],
    ]

    if config.dry_run:
        for cmd in git_steps:
            _would(console, " ".join(cmd))
        _would(console, f"open pull request {FIX_BRANCH} → {default_branch}: {PR_TITLE!r}")
        return None

    for cmd in git_steps:
        run_command(cmd, console, cwd=config.working_dir)

    pr = client.create_pull_request(
        title=PR_TITLE,
        body=PR_BODY,
        base=default_branch,
        head=FIX_BRANCH,
    )
    return pr.get("html_url")


# ── Issue ─────────────────────────────────────────────────────────────────────

def build_issue_body(report: str) -> str:
    """Issue body with the audit report appended verbatim."""
    return ISSUE_BODY_PREFIX + report


def create_issue(
    config: RunConfig, client: GitHubClient, console: Console
) -> Optional[str]:
    """
    Open an issue embedding the captured npm audit report.

    No deduplication: every run with vulnerabilities left opens a new issue.
    Returns the issue's html_url, or None on a dry run.
    """
    report = read_audit_report(config)

    client.get_repository()

    configure_git(config, console)

    if config.dry_run:
        _would(console, f"open issue {ISSUE_TITLE!r} with the npm audit report")
        return None

    issue = client.create_issue(title=ISSUE_TITLE, body=build_issue_body(report))
    return issue.get("html_url")


# ── Internal ─────────────────────────────────────────────────────────────────

def _would(console: Console, action: str) -> None:
    console.print(f"  [warning]would[/warning]  [dim]{escape(action)}[/dim]", highlight=False)
