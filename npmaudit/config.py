"""
Run configuration for npmaudit.

Resolved once at start-up from, in order of precedence:
  1. explicit values (CLI flags)
  2. GitHub Actions inputs (INPUT_WORKING-DIR, INPUT_GITHUB-USER, …)
  3. built-in defaults

The result is a frozen RunConfig passed explicitly to every component.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from npmaudit.actions import get_input, parse_repository

_DEFAULT_API_URL = "https://api.github.com"

# input name → default
INPUT_DEFAULTS: dict[str, str] = {
    "working-dir": ".",
    "github-user": "",
    "github-email": "",
    "github-token": "",
    "github-remote": "origin",
}


@dataclass(frozen=True)
class RunConfig:
    working_dir: Path
    github_user: str = ""
    github_email: str = ""
    github_token: str = ""
    github_remote: str = "origin"

    # "owner/repo" — only required once a hosting API call is made
    repository: str = ""
    api_url: str = _DEFAULT_API_URL
    dry_run: bool = False

    @property
    def owner_repo(self) -> tuple[str, str]:
        """(owner, repo) — raises ConfigError if repository is unset or malformed."""
        return parse_repository(self.repository)

    @property
    def audit_report_path(self) -> Path:
        return self.working_dir / "npm-audit-output.txt"


def load_config(
    working_dir: Optional[str] = None,
    github_user: Optional[str] = None,
    github_email: Optional[str] = None,
    github_token: Optional[str] = None,
    github_remote: Optional[str] = None,
    dry_run: bool = False,
    env: Mapping[str, str] | None = None,
) -> RunConfig:
    """
    Build the RunConfig for this run.

    Any argument left as None (or blank) falls back to the matching action
    input, then to INPUT_DEFAULTS. Never reads anything after returning.
    """
    env = os.environ if env is None else env

    def resolve(name: str, explicit: Optional[str]) -> str:
        if explicit is not None and explicit.strip():
            return explicit.strip()
        return get_input(name, INPUT_DEFAULTS[name], env=env)

    return RunConfig(
        working_dir=Path(resolve("working-dir", working_dir)),
        github_user=resolve("github-user", github_user),
        github_email=resolve("github-email", github_email),
        github_token=resolve("github-token", github_token),
        github_remote=resolve("github-remote", github_remote),
        repository=env.get("GITHUB_REPOSITORY", "").strip(),
        api_url=env.get("GITHUB_API_URL", "").strip().rstrip("/") or _DEFAULT_API_URL,
        dry_run=dry_run,
    )
