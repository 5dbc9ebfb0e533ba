"""Models for external test-runner launches."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, kw_only=True)
class Invocation:
    """A fully built command for one external process launch.

    Bound to exactly one browser and either one spec file (unrecorded mode)
    or the whole joined suite group (recorded mode, ``spec_file`` is None).
    """

    args: Sequence[str]
    browser: str
    spec_file: Path | None = None

    def __str__(self) -> str:
        return " ".join(self.args)
