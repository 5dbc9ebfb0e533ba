"""Models for per-spec result records written by the runner's reporter."""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePath

from pydantic import Field

from parallel_cli.models.base import Model

_SEPARATORS = re.compile(r"[\\/]")


class ResultRecord(Model):
    """Statistics for one executed spec file.

    Stored on disk as ``{file, start, tests, passes, failures, duration}``
    with ``duration`` in milliseconds. Unknown reporter fields are ignored.
    """

    spec_file: str = Field(..., alias="file")
    start_timestamp: datetime = Field(..., alias="start")
    test_count: int = Field(default=0, ge=0, alias="tests")
    pass_count: int = Field(default=0, ge=0, alias="passes")
    fail_count: int = Field(default=0, ge=0, alias="failures")
    duration_ms: int = Field(default=0, ge=0, alias="duration")

    def to_json(self) -> str:
        """Serialize using the on-disk field names."""
        return self.model_dump_json(by_alias=True, indent=2)


def record_filename(spec_file: str | PurePath) -> str:
    """Flat file name for a spec's record: path separators become underscores."""
    return f"{_SEPARATORS.sub('_', str(spec_file))}.json"


@dataclass(frozen=True, kw_only=True)
class Totals:
    """Summed statistics over a group of records."""

    tests: int = 0
    passes: int = 0
    failures: int = 0
    duration: int = 0

    @classmethod
    def of(cls, records: Sequence[ResultRecord]) -> "Totals":
        """Fold records into exact integer sums."""
        return cls(
            tests=sum(r.test_count for r in records),
            passes=sum(r.pass_count for r in records),
            failures=sum(r.fail_count for r in records),
            duration=sum(r.duration_ms for r in records),
        )


@dataclass(frozen=True, kw_only=True)
class BrowserResults:
    """All records relocated into one browser's bucket, plus their totals."""

    browser: str
    records: Sequence[ResultRecord]
    totals: Totals


@dataclass(frozen=True, kw_only=True)
class ResultsReport:
    """Aggregated results for every browser bucket under the results root."""

    groups: Sequence[BrowserResults]

    @property
    def record_count(self) -> int:
        return sum(len(group.records) for group in self.groups)
