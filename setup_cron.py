#!/usr/bin/env python3
"""
Install a crontab line that runs run_scan.py daily at SCAN_HOUR (default 7).
Run once: python setup_cron.py

Re-running replaces the earlier line, so a changed SCAN_HOUR only needs a re-run.
"""
from __future__ import annotations

import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobfeed.config import get_env
from jobfeed.log import get_logger

log = get_logger(__name__)

SCAN_SCRIPT = ROOT / "run_scan.py"


def scan_hour(raw: str) -> int:
    try:
        hour = int(raw)
    except ValueError:
        hour = -1
    if not 0 <= hour <= 23:
        raise ValueError(f"SCAN_HOUR must be an hour from 0 to 23, got {raw!r}")
    return hour


def cron_entry(hour: int, python: str = sys.executable) -> str:
    return f"0 {hour} * * * cd {ROOT} && {python} {SCAN_SCRIPT}"


def install(existing: str, entry: str) -> str | None:
    """Crontab text with ``entry`` replacing any earlier scan line; None when already installed."""
    lines = [line for line in existing.splitlines() if line.strip()]
    if entry in lines:
        return None
    kept = [line for line in lines if str(SCAN_SCRIPT) not in line]
    return "\n".join(kept + [entry]) + "\n"


def _crontab(*args: str, stdin: str | None = None) -> subprocess.CompletedProcess:
    return subprocess.run(["crontab", *args], input=stdin, capture_output=True, text=True, timeout=5)


def main() -> int:
    try:
        entry = cron_entry(scan_hour(get_env("SCAN_HOUR") or "7"))
    except ValueError as exc:
        log.error("%s", exc)
        return 1

    try:
        current = _crontab("-l")
        # crontab -l exits non-zero when the user has no crontab yet
        new_crontab = install(current.stdout if current.returncode == 0 else "", entry)
        if new_crontab is None:
            log.info("Cron entry already present. No change.")
            return 0
        proc = _crontab("-", stdin=new_crontab)
    except FileNotFoundError:
        log.error("crontab not found. Add this line to your scheduler by hand:\n  %s", entry)
        return 1
    except subprocess.TimeoutExpired:
        log.error("crontab timed out. Add this line by hand:\n  %s", entry)
        return 1

    if proc.returncode != 0:
        log.error("crontab rejected the entry: %s", proc.stderr.strip())
        return 1
    log.info("Cron installed: %s", entry)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
