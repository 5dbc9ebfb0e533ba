"""Result files on disk: cleanup, writing and per-browser relocation."""

import logging
import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from parallel_cli.models.result import ResultRecord, record_filename

log = logging.getLogger(__name__)

DEFAULT_RESULTS_DIR = "parallel-cli-results"


@dataclass(frozen=True, kw_only=True)
class ResultCollector:
    """Owns the results root shared by every slot of a run.

    Reporters write one flat record per spec into the root while a browser
    pass runs. Once every slot of the pass has exited, ``relocate`` moves
    those records into the browser's own directory, which keeps the flat
    namespace empty for the next browser.
    """

    results_root: Path

    def reset(self) -> None:
        """Remove every file and directory below the results root."""
        if not self.results_root.exists():
            return

        for entry in self.results_root.iterdir():
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        log.info("Cleared previous results in %s", self.results_root)

    def write_record(self, record: ResultRecord) -> Path:
        """Write a record into the flat namespace of the results root."""
        self.results_root.mkdir(parents=True, exist_ok=True)
        path = self.results_root / record_filename(record.spec_file)
        path.write_text(record.to_json(), encoding="utf-8")
        return path

    def pending_records(self) -> Sequence[Path]:
        """Flat files waiting to be relocated."""
        if not self.results_root.is_dir():
            return []
        return sorted(p for p in self.results_root.iterdir() if not p.is_dir())

    def relocate(self, browser: str) -> Sequence[Path]:
        """Move every flat file into the browser's directory.

        Must only be called after all slots of the browser pass have exited.

        Returns:
            New locations of the moved files

        """
        pending = self.pending_records()
        if not pending:
            log.info("No result records to relocate for %s", browser)
            return []

        browser_dir = self.browser_dir(browser)
        browser_dir.mkdir(exist_ok=True)

        moved = [path.replace(browser_dir / path.name) for path in pending]
        log.info("Moved %d result record(s) into %s", len(moved), browser_dir)
        return moved

    def browser_dir(self, browser: str) -> Path:
        return self.results_root / browser
