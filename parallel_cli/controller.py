"""Run controller sequencing browser passes through the worker pool."""

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from parallel_cli.collector import ResultCollector
from parallel_cli.dashboard import DashboardPointer
from parallel_cli.errors import EmptyResultSetError
from parallel_cli.models.config import RunConfig
from parallel_cli.models.invocation import Invocation
from parallel_cli.models.run import BrowserPass, RunSummary
from parallel_cli.pool import WorkerPool
from parallel_cli.runners.base import TestRunner
from parallel_cli.spec_resolver import resolve_specs, spec_group

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class RunController:
    """Runs every configured browser, one after the other.

    Browsers share the flat results namespace, so a browser's pool must be
    fully joined and its records relocated before the next browser starts.
    """

    runner: TestRunner
    pool: WorkerPool
    collector: ResultCollector
    dashboard: DashboardPointer
    project_dir: Path

    async def run(self, config: RunConfig) -> RunSummary:
        """Execute a full run and return what each browser pass produced.

        Args:
            config: Resolved configuration for this run

        Returns:
            Summary with one pass per browser, in configured order

        """
        await self.dashboard.clear()
        self.collector.reset()

        build_id = str(uuid.uuid4())
        log.info(
            "Starting %s run %s for %d browser(s)",
            "recorded" if config.recorded else "unrecorded",
            build_id,
            len(config.browsers),
        )

        passes = [
            await self._run_browser(config, browser, build_id)
            for browser in config.browsers
        ]

        return RunSummary(
            build_id=build_id,
            passes=passes,
            dashboard_url=self.dashboard.url,
        )

    async def _run_browser(
        self, config: RunConfig, browser: str, build_id: str
    ) -> BrowserPass:
        log.info("Running browser %s", browser)

        if config.recorded:
            invocations = self._recorded_invocations(config, browser, build_id)
            expected = None
        else:
            try:
                specs = resolve_specs(
                    config.spec_suites,
                    self.runner.spec_root(self.project_dir),
                    self.runner.spec_patterns,
                )
            except EmptyResultSetError as exc:
                log.error("%s, skipping %s", exc, browser)
                return BrowserPass(
                    browser=browser, expected=0, observed=0, skipped=True
                )

            invocations = [
                self.runner.build_invocation(config, browser, spec, build_id)
                for spec in specs
            ]
            expected = len(specs)

        slots = await self.pool.run(invocations, ceiling=config.parallelism)
        moved = self.collector.relocate(browser)

        browser_pass = BrowserPass(
            browser=browser, expected=expected, observed=len(moved), slots=slots
        )
        if browser_pass.missing:
            log.warning(
                "%d of %d spec(s) on %s produced no result record",
                browser_pass.missing,
                expected,
                browser,
            )
        return browser_pass

    def _recorded_invocations(
        self, config: RunConfig, browser: str, build_id: str
    ) -> Sequence[Invocation]:
        """One identical invocation per parallel slot.

        The recording service hands out specs to whichever process asks
        next, so every slot gets the full suite group.
        """
        group = spec_group(config.spec_suites, self.runner.spec_dir)
        invocation = self.runner.build_invocation(config, browser, group, build_id)
        return [invocation] * config.parallelism
