"""
External command runner.

run_command:
  - Receives an argument list and a Rich Console
  - Echoes the command, streams its output live
  - Optionally redirects stdout to a capture file (like `cmd > file`)
  - Returns the streamed output on an accepted exit code
  - Raises CommandError otherwise

There is no timeout: a hung npm or git process hangs the run, and the
CI job timeout is what ends it.
"""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import Iterable

from rich.console import Console
from rich.markup import escape

from npmaudit.errors import CommandError


def run_command(
    cmd: list[str],
    console: Console,
    cwd: Path | str | None = None,
    stdout_path: Path | None = None,
    ok_codes: Iterable[int] = (0,),
) -> str:
    """
    Run cmd with live output streaming.

    Args:
        cmd:         Argument list, e.g. ["npm", "audit", "fix"]. Never run
                     through a shell, so author names with spaces stay intact.
        console:     Rich Console for the echoed command and its output.
        cwd:         Working directory for the process.
        stdout_path: If set, stdout is written to this file instead of the
                     console; stderr is still streamed.
        ok_codes:    Exit codes treated as success.

    Returns:
        Everything that was streamed to the console (stdout+stderr, or just
        stderr when stdout_path is set).
    """
    console.print(f"  [dim]$[/dim]  [command]{escape(shlex.join(cmd))}[/command]")

    try:
        if stdout_path is not None:
            with open(stdout_path, "w", encoding="utf-8") as out:
                proc = subprocess.Popen(
                    cmd,
                    cwd=cwd,
                    stdout=out,
                    stderr=subprocess.PIPE,
                    text=True,
                    bufsize=1,
                )
                streamed = _stream(proc, proc.stderr, console)
        else:
            proc = subprocess.Popen(
                cmd,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                bufsize=1,
            )
            streamed = _stream(proc, proc.stdout, console)
    except FileNotFoundError:
        console.print(f"  [critical]❌  Command not found: {cmd[0]}[/critical]\n")
        raise CommandError(cmd, 127, f"Command not found: {cmd[0]}") from None

    if proc.returncode not in tuple(ok_codes):
        console.print(
            f"  [critical]❌  Finished with exit code {proc.returncode}.[/critical]\n"
        )
        raise CommandError(cmd, proc.returncode, streamed)

    return streamed


def _stream(proc: subprocess.Popen, stream, console: Console) -> str:
    """Echo every non-blank line of stream, wait for proc, return the collected text."""
    lines: list[str] = []
    if stream is not None:
        for line in stream:
            lines.append(line)
            stripped = line.rstrip()
            if stripped:
                console.print(f"  [dim]{escape(stripped)}[/dim]", highlight=False)
    proc.wait()
    return "".join(lines)
