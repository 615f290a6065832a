"""
GitHub Actions runner surface.

Action inputs arrive as INPUT_<NAME> environment variables (name upper-cased,
spaces replaced by underscores, dashes kept). Step outputs are appended to the
file named by GITHUB_OUTPUT. The repository under test is GITHUB_REPOSITORY
("owner/repo").
"""

from __future__ import annotations

import os
import uuid
from typing import Mapping

from rich.console import Console
from rich.markup import escape

from npmaudit.errors import ConfigError


def get_input(name: str, default: str = "", env: Mapping[str, str] | None = None) -> str:
    """
    Return the trimmed value of action input `name`, or default when unset/blank.

    get_input("working-dir") reads INPUT_WORKING-DIR.
    """
    env = os.environ if env is None else env
    key = "INPUT_" + name.replace(" ", "_").upper()
    value = env.get(key, "").strip()
    return value or default


def set_output(
    name: str,
    value: object,
    env: Mapping[str, str] | None = None,
    console: Console | None = None,
) -> None:
    """
    Publish a step output.

    Booleans are rendered as "true"/"false" so workflow expressions can
    compare against them. Multi-line values use the heredoc delimiter form.
    Without GITHUB_OUTPUT (local runs) the value is only printed to the
    console as `name=value`.
    """
    env = os.environ if env is None else env
    text = _to_output_text(value)
    output_file = env.get("GITHUB_OUTPUT", "")

    if not output_file:
        console = console or Console()
        console.print(f"  [dim]{escape(name)}={escape(text)}[/dim]", highlight=False)
        return

    if "\n" in text:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        entry = f"{name}<<{delimiter}\n{text}\n{delimiter}\n"
    else:
        entry = f"{name}={text}\n"

    with open(output_file, "a", encoding="utf-8") as fh:
        fh.write(entry)


def parse_repository(full_name: str) -> tuple[str, str]:
    """Split "owner/repo" into its two halves; anything else is a ConfigError."""
    owner, sep, repo = full_name.strip().partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise ConfigError(
            f"Expected repository as 'owner/repo', got {full_name!r}. "
            "Set GITHUB_REPOSITORY when running outside GitHub Actions."
        )
    return owner, repo


def _to_output_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
