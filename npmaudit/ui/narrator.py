"""
RunNarrator — step-by-step console narration for one remediation run.

Each orchestrator step prints a header, then zero or more one-line
outcomes. At the end a summary panel lists what the run did.

Usage:
    narrator = RunNarrator(console)
    narrator.print_run_header(config)
    narrator.step("fix", "Running npm audit fix")
    narrator.outcome("pass", "npm audit fix", "completed")
    narrator.print_summary(summary)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from npmaudit.ui.theme import (
    APP_NAME,
    APP_VERSION,
    COLOR_BRAND,
    COLOR_DIM,
    COLOR_TEXT,
    STATUS_ICONS,
    STATUS_STYLES,
    STEP_ICONS,
)

if TYPE_CHECKING:
    from npmaudit.config import RunConfig
    from npmaudit.main import RunSummary


class RunNarrator:
    """Prints step headers and outcomes in orchestrator order."""

    def __init__(self, console: Console) -> None:
        self.console = console

    # ── Public API ────────────────────────────────────────────────────────────

    def print_run_header(self, config: "RunConfig") -> None:
        """Print the tool banner and the resolved working directory."""
        t = Text()
        t.append(f"  {APP_NAME}", style=f"bold {COLOR_BRAND}")
        t.append(f"  v{APP_VERSION}", style=COLOR_DIM)
        if config.dry_run:
            t.append("  ·  dry run", style="warning")
        self.console.print(t)
        self.console.print(f"  [dim]current working dir[/dim]  [text]{escape(str(config.working_dir))}[/text]")
        self.console.print()

    def step(self, key: str, label: str) -> None:
        """Print a bold step header with a thin underline."""
        self.console.print(_format_step_header(key, label, self.console.width))

    def outcome(self, status: str, name: str, message: str) -> None:
        """Print a one-line outcome under the current step."""
        self.console.print(_format_outcome(status, name, message))
        self.console.print()

    def print_summary(self, summary: "RunSummary") -> None:
        """Print the end-of-run panel."""
        self.console.print(build_summary_panel(summary))


# ── Module-level helpers ──────────────────────────────────────────────────────

def _format_step_header(key: str, label: str, console_width: int = 80) -> Group:
    """Bold step header with thin underline: e.g. '  🔧  Running npm audit fix'"""
    icon = STEP_ICONS.get(key, "  ")
    header = Text()
    header.append(f"  {icon}  ", style="bold")
    header.append(label, style=f"bold {COLOR_TEXT}")
    rule_width = min(44, console_width - 6)
    rule = Text("  " + "─" * rule_width, style=COLOR_DIM)
    return Group(header, rule)


def _format_outcome(status: str, name: str, message: str) -> Text:
    """
    One-line outcome:
      ✅  package-lock.json                unchanged
      ⚠️   npm audit                        found 3 vulnerabilities
    """
    icon = STATUS_ICONS.get(status, "?")
    style = STATUS_STYLES.get(status)

    line = Text()
    line.append(f"  {icon}  ", style=str(style))
    line.append(name.ljust(32), style=str(style))
    line.append(f"  {message}", style=COLOR_DIM)
    return line


def build_summary_panel(summary: "RunSummary") -> Panel:
    """Panel listing the lockfile verdict, audit verdict, and opened PR/issue links."""
    t = Text()

    if summary.is_updated:
        t.append("  package-lock.json updated", style="pass")
    else:
        t.append("  package-lock.json unchanged", style="dim")
    t.append("\n")

    if summary.fixed_all:
        t.append("  All vulnerabilities fixed", style="pass")
    else:
        t.append("  Vulnerabilities remain", style="warning")
    t.append("\n")

    if summary.pull_request_url:
        t.append(f"  Pull request  {summary.pull_request_url}\n", style=COLOR_TEXT)
    if summary.issue_url:
        t.append(f"  Issue         {summary.issue_url}\n", style=COLOR_TEXT)

    return Panel(t, title=f"[brand]{APP_NAME}[/brand]", border_style=COLOR_BRAND)
