"""
npm steps.

npm_audit_fix             — `npm install` then `npm audit fix`
capture_audit_report      — `npm audit > npm-audit-output.txt`, must yield a summary
read_audit_report         — read the capture file back
is_audit_summary          — does the text look like a real npm audit report
is_fully_fixed            — the "found 0 vulnerabilities" marker check
check_if_audit_fixes_all  — capture + read + check in one call
"""

from __future__ import annotations

import re
from pathlib import Path

from rich.console import Console

from npmaudit.config import RunConfig
from npmaudit.errors import CommandError, ReportError
from npmaudit.fixer.executor import run_command


# ── Constants ─────────────────────────────────────────────────────────────────

FIXED_MARKER = "found 0 vulnerabilities"

# npm audit exits 1 when it finds vulnerabilities, and also when it fails
# outright (no lockfile, registry down). Only the first prints a summary line.
_AUDIT_OK_CODES = (0, 1)

# "found 0 vulnerabilities", "3 vulnerabilities (1 moderate, 2 high)",
# "1 low severity vulnerability"
_SUMMARY_RE = re.compile(r"\b\d+ (?:\w+ severity )?vulnerabilit(?:y|ies)\b")


# ── Fix ───────────────────────────────────────────────────────────────────────

def npm_audit_fix(config: RunConfig, console: Console) -> None:
    """Install dependencies, then let npm apply every non-breaking fix it can."""
    console.print("  [dim]attempting to npm audit fix…[/dim]")
    run_command(["npm", "install"], console, cwd=config.working_dir)
    run_command(["npm", "audit", "fix"], console, cwd=config.working_dir)


# ── Verify ────────────────────────────────────────────────────────────────────

def is_fully_fixed(report: str) -> bool:
    """
    Return True if the audit report says nothing is left to fix.

    Plain substring match on npm's summary line. This is the only place that
    knows the report format.
    """
    return FIXED_MARKER in report


def is_audit_summary(report: str) -> bool:
    """Return True if report carries npm's vulnerability count line."""
    return _SUMMARY_RE.search(report) is not None


def capture_audit_report(config: RunConfig, console: Console) -> Path:
    """
    Run `npm audit` with stdout redirected to the report file; return its path.

    Exit code 1 is only a result when npm printed a summary. A report
    without one means npm itself failed, and that raises CommandError.
    """
    cmd = ["npm", "audit"]
    path = config.audit_report_path
    streamed = run_command(
        cmd,
        console,
        cwd=config.working_dir,
        stdout_path=path,
        ok_codes=_AUDIT_OK_CODES,
    )

    report = read_audit_report(config)
    if not is_audit_summary(report):
        # exit 0 always prints "found 0 vulnerabilities", so this was exit 1
        console.print("  [critical]❌  npm audit produced no audit summary.[/critical]\n")
        raise CommandError(cmd, 1, report + streamed)
    return path


def read_audit_report(config: RunConfig) -> str:
    """Return the captured report text. Unreadable file → ReportError."""
    path = config.audit_report_path
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ReportError(f"Cannot read audit report {path}: {e.strerror or e}") from e


def check_if_audit_fixes_all(config: RunConfig, console: Console) -> bool:
    """Capture a fresh npm audit report and check it for the zero-vulnerability marker."""
    console.print("  [dim]check if npm audit fixes all…[/dim]")
    capture_audit_report(config, console)
    return is_fully_fixed(read_audit_report(config))
