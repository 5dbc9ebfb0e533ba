"""Bounded worker pool with staggered process starts."""

import asyncio
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TypeAlias

from parallel_cli.dashboard import (
    DASHBOARD_URL_PATTERN,
    DashboardPointer,
    find_dashboard_url,
)
from parallel_cli.models.invocation import Invocation
from parallel_cli.models.run import SlotOutcome
from parallel_cli.process import Launcher, ProcessLauncher

log = logging.getLogger(__name__)

DEFAULT_STAGGER_INTERVAL = 2.0

QueuedInvocation: TypeAlias = tuple[int, Invocation]


@dataclass(frozen=True, kw_only=True)
class WorkerPool:
    """Runs invocations with at most ``ceiling`` processes alive at once.

    The pool starts ``ceiling`` lanes that pull from a shared queue; a lane
    admits the next invocation as soon as its previous process exits. Lane
    ``i`` waits ``i * stagger_interval`` before its first spawn so that
    process start-up is spread out instead of happening all at once.
    """

    dashboard: DashboardPointer
    launcher: Launcher = field(default_factory=ProcessLauncher)
    stagger_interval: float = DEFAULT_STAGGER_INTERVAL
    dashboard_pattern: re.Pattern[str] = DASHBOARD_URL_PATTERN

    async def run(
        self,
        invocations: Sequence[Invocation],
        ceiling: int,
    ) -> Sequence[SlotOutcome]:
        """Run all invocations and wait for every one of them to finish.

        Args:
            invocations: Commands to run, in admission order
            ceiling: Maximum number of concurrently running processes

        Returns:
            One outcome per invocation, in admission order. A failed or
            crashed process is reported in its outcome and never cancels
            the other slots.

        """
        if not invocations:
            return []
        if ceiling < 1:
            raise ValueError(f"Concurrency ceiling must be positive, got {ceiling}")

        queue: asyncio.Queue[QueuedInvocation] = asyncio.Queue()
        for position, invocation in enumerate(invocations):
            queue.put_nowait((position, invocation))

        lanes = min(ceiling, len(invocations))
        log.info(
            "Launching %d invocation(s) on %d slot(s)", len(invocations), lanes
        )
        lane_outcomes = await asyncio.gather(
            *(self._lane(index, queue, len(invocations)) for index in range(lanes))
        )

        positioned = sorted(
            (item for lane in lane_outcomes for item in lane), key=lambda item: item[0]
        )
        return [outcome for _, outcome in positioned]

    async def _lane(
        self,
        slot_index: int,
        queue: asyncio.Queue[QueuedInvocation],
        total: int,
    ) -> list[tuple[int, SlotOutcome]]:
        """Drain the queue one invocation at a time."""
        outcomes: list[tuple[int, SlotOutcome]] = []
        first = True

        while not queue.empty():
            position, invocation = queue.get_nowait()

            if first:
                await asyncio.sleep(slot_index * self.stagger_interval)
                first = False

            log.info("[%d/%d] Running command: %s", position + 1, total, invocation)
            try:
                outcome = await self._run_slot(slot_index, invocation)
            except Exception as exc:
                log.error("Slot %d failed to run: %s", slot_index, exc, exc_info=exc)
                outcome = SlotOutcome(
                    invocation=invocation,
                    slot_index=slot_index,
                    status="error",
                    message=str(exc),
                )
            outcomes.append((position, outcome))

        return outcomes

    async def _run_slot(self, slot_index: int, invocation: Invocation) -> SlotOutcome:
        result = await self.launcher(invocation)

        dashboard_url = find_dashboard_url(result.output, self.dashboard_pattern)
        if dashboard_url:
            await self.dashboard.store(dashboard_url)

        if result.exit_code != 0:
            log.warning(
                "Process for %s exited with code %d",
                invocation.spec_file or invocation.browser,
                result.exit_code,
            )

        return SlotOutcome(
            invocation=invocation,
            slot_index=slot_index,
            status="passed" if result.exit_code == 0 else "failed",
            exit_code=result.exit_code,
            duration=result.duration,
            dashboard_url=dashboard_url,
        )
