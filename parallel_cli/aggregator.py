"""Aggregate per-browser result records into totals."""

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from parallel_cli.errors import ResultsDirectoryMissingError
from parallel_cli.models.result import (
    BrowserResults,
    ResultRecord,
    ResultsReport,
    Totals,
)

log = logging.getLogger(__name__)


def aggregate(results_root: Path) -> ResultsReport:
    """Load every browser bucket below ``results_root`` and total it.

    Flat files directly in the root (records not yet relocated) are ignored.
    Reading never modifies the directory, so aggregating twice over the
    same tree gives the same report.

    Raises:
        ResultsDirectoryMissingError: If the results root does not exist

    """
    if not results_root.is_dir():
        raise ResultsDirectoryMissingError(
            f"{results_root} does not exist, unable to get test results. "
            "Run your tests first."
        )

    groups: list[BrowserResults] = []
    for browser_dir in sorted(p for p in results_root.iterdir() if p.is_dir()):
        records = load_records(browser_dir)
        groups.append(
            BrowserResults(
                browser=browser_dir.name,
                records=records,
                totals=Totals.of(records),
            )
        )

    log.info(
        "Aggregated %d record(s) across %d browser(s)",
        sum(len(g.records) for g in groups),
        len(groups),
    )
    return ResultsReport(groups=groups)


def load_records(browser_dir: Path) -> Sequence[ResultRecord]:
    """Load all records of one browser bucket, skipping unreadable files."""
    records: list[ResultRecord] = []
    for path in sorted(browser_dir.glob("*.json")):
        try:
            records.append(ResultRecord.model_validate(json.loads(path.read_text())))
        except (OSError, ValueError) as exc:
            log.warning("Skipping unreadable result record %s: %s", path, exc)
    return records
