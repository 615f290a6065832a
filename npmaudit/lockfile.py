"""
package-lock.json snapshots and change detection.

read_lockfile     — parse the lock file into a dict (the snapshot)
check_snapshots   — reject a run where both snapshots are empty
lock_has_changed  — compare two snapshots, publish is_updated

Snapshots are compared by their canonical JSON text (keys sorted at every
level), so a lock file whose keys were merely reordered counts as unchanged.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from rich.console import Console

from npmaudit.actions import set_output
from npmaudit.errors import LockfileError, MissingLockDataError

LOCKFILE_NAME = "package-lock.json"


# ── Reader ────────────────────────────────────────────────────────────────────

def read_lockfile(working_dir: Path | str) -> dict[str, Any]:
    """
    Return the parsed package-lock.json under working_dir.

    Empty file → {}. Missing, unreadable, or invalid JSON → LockfileError.
    """
    path = Path(working_dir) / LOCKFILE_NAME

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LockfileError(f"Cannot read {path}: {e.strerror or e}") from e

    if not raw:
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise LockfileError(f"{path} is not valid JSON: {e}") from e

    return data or {}


# ── Change detection ──────────────────────────────────────────────────────────

def serialize_snapshot(snapshot: Any) -> str:
    """Canonical JSON text for a snapshot: sorted keys, no insignificant whitespace."""
    return json.dumps(snapshot, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def check_snapshots(previous: Any, current: Any) -> None:
    """
    Raise MissingLockDataError when neither snapshot has content.

    One empty side is a real change (e.g. npm install filled an empty lock
    file) and goes through the normal comparison.
    """
    if not previous and not current:
        raise MissingLockDataError(
            "[run] missing previous or current package-lock.json data"
        )


def lock_has_changed(
    previous: Any,
    current: Any,
    env: Mapping[str, str] | None = None,
    console: Console | None = None,
) -> bool:
    """
    Return True iff the two snapshots differ.

    Publishes the is_updated output on every call, before returning,
    whichever way the comparison goes.
    """
    changed = serialize_snapshot(previous) != serialize_snapshot(current)
    set_output("is_updated", changed, env=env, console=console)
    return changed
