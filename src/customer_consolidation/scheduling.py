"""Daily trigger management via the user's crontab.

The consolidation job does not schedule itself; cron fires `sync` and is
expected not to start a run while the previous one is still going.
"""

import logging
import subprocess
from typing import Callable

logger = logging.getLogger(__name__)

CRON_MARKER = "# customer-consolidation"

Runner = Callable[..., subprocess.CompletedProcess]


def cron_line(hour: int, interval_days: int, command: str) -> str:
    """Crontab entry running `command` at minute 0 of `hour`, every `interval_days` days."""
    if not 0 <= hour <= 23:
        raise ValueError("Hour must be between 0 and 23")
    if interval_days < 1:
        raise ValueError("Interval must be at least 1 day")
    day_field = "*" if interval_days == 1 else f"*/{interval_days}"
    return f"0 {hour} {day_field} * * {command} {CRON_MARKER}"


class CronScheduler:
    """Installs, removes and lists tagged crontab entries for the sync command."""

    def __init__(self, command: str, *, runner: Runner = subprocess.run):
        self.command = command
        self._run = runner

    def _read(self) -> list[str]:
        result = self._run(["crontab", "-l"], capture_output=True, text=True)
        if result.returncode != 0:
            # `crontab -l` exits non-zero when the user has no crontab yet
            if "no crontab" in (result.stderr or "").lower():
                return []
            raise RuntimeError(f"crontab -l failed: {result.stderr.strip()}")
        return [line for line in result.stdout.splitlines() if line.strip()]

    def _write(self, lines: list[str]) -> None:
        text = "\n".join(lines) + "\n" if lines else ""
        self._run(["crontab", "-"], input=text, capture_output=True, text=True, check=True)

    def entries(self) -> list[str]:
        """Installed consolidation entries."""
        return [line for line in self._read() if line.endswith(CRON_MARKER)]

    def remove(self) -> int:
        """Remove all consolidation entries. Returns how many were removed."""
        lines = self._read()
        kept = [line for line in lines if not line.endswith(CRON_MARKER)]
        removed = len(lines) - len(kept)
        if removed:
            self._write(kept)
            logger.info("Removed %d existing trigger(s)", removed)
        else:
            logger.info("No existing triggers found")
        return removed

    def install(self, hour: int = 8, interval_days: int = 1) -> str:
        """Replace any existing entry with one running at `hour` every `interval_days` days."""
        line = cron_line(hour, interval_days, self.command)
        self.remove()
        self._write(self._read() + [line])
        logger.info("Trigger installed: every %d day(s) at %02d:00", interval_days, hour)
        return line
