"""
Fix execution subsystem for npmaudit.

Modules:
  executor.py — run_command: run one external process, stream its output,
                raise CommandError on a non-zero exit.
  audit.py    — npm steps: install + audit fix, audit report capture,
                "found 0 vulnerabilities" marker check.
"""
