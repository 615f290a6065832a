"""
Error taxonomy for npmaudit.

Every failure is fatal. Components raise one of these and nothing below
the CLI catches them; cli() prints the message and exits with status 1.
"""

from __future__ import annotations


class NpmAuditError(Exception):
    """Base class for every error npmaudit raises on purpose."""


# ── Configuration / IO ────────────────────────────────────────────────────────

class ConfigError(NpmAuditError):
    """A required setting (e.g. GITHUB_REPOSITORY) is missing or malformed."""


class LockfileError(NpmAuditError):
    """package-lock.json is missing, unreadable, or not valid JSON."""


class ReportError(NpmAuditError):
    """The captured npm audit report could not be read back."""


# ── Logical ───────────────────────────────────────────────────────────────────

class MissingLockDataError(NpmAuditError):
    """Both the pre- and post-fix lock snapshots are empty — the run is inconsistent."""


# ── External collaborators ────────────────────────────────────────────────────

class CommandError(NpmAuditError):
    """An external process exited with a status we do not accept."""

    def __init__(self, cmd: list[str], returncode: int, output: str = "") -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.output = output
        super().__init__(
            f"Command failed with exit code {returncode}: {' '.join(cmd)}"
        )


class GitHubAPIError(NpmAuditError):
    """The GitHub REST API answered with a non-2xx status."""

    def __init__(self, method: str, url: str, status_code: int, detail: str = "") -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.detail = detail
        message = f"{method} {url} returned {status_code}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
