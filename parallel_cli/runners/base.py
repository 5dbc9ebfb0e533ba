"""Abstract base class for external test runners."""

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path, PurePath

from parallel_cli.dashboard import DASHBOARD_URL_PATTERN
from parallel_cli.models.config import RunConfig
from parallel_cli.models.invocation import Invocation


@dataclass(frozen=True, kw_only=True)
class TestRunner(ABC):
    """Abstract base for the external tool launched once per slot.

    A runner knows where its specs live, how to recognise a spec file and
    how to turn a run configuration into a command line. Everything else
    (scheduling, result collection, reporting) is runner independent.
    """

    __test__ = False

    @property
    @abstractmethod
    def spec_dir(self) -> PurePath:
        """Directory, relative to the project, that spec suites live under."""

    @property
    @abstractmethod
    def spec_patterns(self) -> Sequence[str]:
        """File name patterns identifying spec files."""

    @property
    def dashboard_pattern(self) -> re.Pattern[str]:
        """Pattern of the dashboard link the runner prints for recorded runs."""
        return DASHBOARD_URL_PATTERN

    @abstractmethod
    def build_invocation(
        self,
        config: RunConfig,
        browser: str,
        specs: Path | str,
        build_id: str,
    ) -> Invocation:
        """Build the command for one process launch.

        Args:
            config: Resolved run configuration
            browser: Browser the process runs against
            specs: A single spec file (unrecorded mode) or the joined suite
                group (recorded mode)
            build_id: Identifier shared by every invocation of the run

        Returns:
            The invocation to hand to the worker pool

        """

    def spec_root(self, project_dir: Path) -> Path:
        return project_dir / self.spec_dir
