"""Dashboard URL scraping and the process-wide dashboard pointer."""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

log = logging.getLogger(__name__)

# https://<host>/projects/<project id>/runs/<run number>
DASHBOARD_URL_PATTERN = re.compile(
    r"https://[\w.-]+(?::\d+)?/projects/\w+/runs/\d+", re.IGNORECASE
)


def find_dashboard_url(
    output: str, pattern: re.Pattern[str] = DASHBOARD_URL_PATTERN
) -> str | None:
    """Return the last dashboard URL printed in ``output``, or None."""
    matches = pattern.findall(output)
    return matches[-1] if matches else None


@dataclass(kw_only=True)
class DashboardPointer:
    """Most recently observed dashboard URL.

    Concurrent slots store into the same cell; the last store wins, so with
    several recorded processes the kept URL is whichever slot exited last.
    When ``state_file`` is set the value is mirrored there so that a later
    ``report`` can show the link of the latest run.
    """

    state_file: Path | None = None
    _url: str | None = field(default=None, init=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    @property
    def url(self) -> str | None:
        return self._url

    async def store(self, url: str) -> None:
        async with self._lock:
            self._url = url
            if self.state_file is not None:
                self.state_file.parent.mkdir(parents=True, exist_ok=True)
                self.state_file.write_text(url, encoding="utf-8")
        log.debug("Dashboard pointer updated: %s", url)

    async def clear(self) -> None:
        async with self._lock:
            self._url = None
            if self.state_file is not None:
                self.state_file.unlink(missing_ok=True)

    def load(self) -> str | None:
        """Restore the pointer from ``state_file`` (if any) and return it."""
        if self.state_file is not None and self.state_file.is_file():
            self._url = self.state_file.read_text(encoding="utf-8").strip() or None
        return self._url
