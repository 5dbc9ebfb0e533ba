"""Models describing what happened while running a browser pass."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from parallel_cli.models.invocation import Invocation


@dataclass(frozen=True, kw_only=True)
class SlotOutcome:
    """Execution outcome of a single slot.

    ``failed`` means the process exited non-zero, ``error`` means it could
    not be launched at all. Neither aborts the rest of the pool.
    """

    invocation: Invocation
    slot_index: int
    status: Literal["passed", "failed", "error"]
    exit_code: int | None = None
    duration: float = 0.0
    dashboard_url: str | None = None
    message: str | None = None


@dataclass(frozen=True, kw_only=True)
class BrowserPass:
    """Summary of one browser's pass through the worker pool."""

    browser: str
    expected: int | None
    observed: int
    slots: Sequence[SlotOutcome] = field(default_factory=tuple)
    skipped: bool = False

    @property
    def missing(self) -> int:
        """Specs that ran but left no result record (unrecorded mode only)."""
        if self.expected is None:
            return 0
        return max(self.expected - self.observed, 0)

    @property
    def failed_slots(self) -> int:
        return sum(1 for slot in self.slots if slot.status != "passed")


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Everything the controller knows about a finished run."""

    build_id: str
    passes: Sequence[BrowserPass]
    dashboard_url: str | None = None

    @property
    def missing(self) -> int:
        return sum(p.missing for p in self.passes)
