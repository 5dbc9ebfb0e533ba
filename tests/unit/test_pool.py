"""Tests for the bounded, staggered worker pool."""

import asyncio
from pathlib import Path

import pytest

from parallel_cli.dashboard import DashboardPointer
from parallel_cli.models.invocation import Invocation
from parallel_cli.pool import WorkerPool

from .conftest import FakeLauncher


def spec_invocations(count: int, browser: str = "electron") -> list[Invocation]:
    return [
        Invocation(
            args=("runner", "--spec", f"/specs/spec{i}.cy.ts"),
            browser=browser,
            spec_file=Path(f"/specs/spec{i}.cy.ts"),
        )
        for i in range(count)
    ]


def make_pool(
    launcher: FakeLauncher, dashboard: DashboardPointer, stagger: float = 0.0
) -> WorkerPool:
    return WorkerPool(dashboard=dashboard, launcher=launcher, stagger_interval=stagger)


async def test_returns_empty_for_no_invocations(
    launcher: FakeLauncher, dashboard: DashboardPointer
) -> None:
    """Nothing is launched when there is nothing to run."""
    outcomes = await make_pool(launcher, dashboard).run([], ceiling=3)

    assert outcomes == []
    assert launcher.calls == []


async def test_rejects_non_positive_ceiling(
    launcher: FakeLauncher, dashboard: DashboardPointer
) -> None:
    """A ceiling below one is a programming error."""
    with pytest.raises(ValueError, match="ceiling"):
        await make_pool(launcher, dashboard).run(spec_invocations(1), ceiling=0)


async def test_runs_every_invocation_once(
    launcher: FakeLauncher, dashboard: DashboardPointer
) -> None:
    """Each invocation is launched exactly once and reported in order."""
    invocations = spec_invocations(5)

    outcomes = await make_pool(launcher, dashboard).run(invocations, ceiling=2)

    assert sorted(str(c) for c in launcher.calls) == sorted(str(i) for i in invocations)
    assert [o.invocation for o in outcomes] == invocations
    assert all(o.status == "passed" for o in outcomes)


async def test_bounds_concurrency(dashboard: DashboardPointer) -> None:
    """Never more than `ceiling` processes run at the same time."""
    launcher = FakeLauncher(delay=0.02)

    await make_pool(launcher, dashboard).run(spec_invocations(7), ceiling=3)

    assert launcher.max_active == 3
    assert len(launcher.calls) == 7


async def test_admits_next_spec_when_a_slot_frees(dashboard: DashboardPointer) -> None:
    """A queued spec starts as soon as any slot finishes, not after a whole wave."""
    launcher = FakeLauncher(
        delays={"spec0.cy.ts": 0.3, "spec1.cy.ts": 0.01, "spec2.cy.ts": 0.01}
    )

    await make_pool(launcher, dashboard).run(spec_invocations(3), ceiling=2)

    assert launcher.starts["spec2.cy.ts"] < launcher.finishes["spec0.cy.ts"]


async def test_staggers_slot_starts(dashboard: DashboardPointer) -> None:
    """Slot i starts no earlier than i * interval after pool launch."""
    interval = 0.05
    launcher = FakeLauncher(delay=0.01)
    pool = make_pool(launcher, dashboard, stagger=interval)

    launched_at = asyncio.get_running_loop().time()
    outcomes = await pool.run(spec_invocations(6), ceiling=3)

    assert {o.slot_index for o in outcomes} == {0, 1, 2}
    for outcome in outcomes:
        assert outcome.invocation.spec_file is not None
        started = launcher.starts[outcome.invocation.spec_file.name]
        assert started - launched_at >= outcome.slot_index * interval - 0.005


async def test_outcomes_carry_slot_index(
    launcher: FakeLauncher, dashboard: DashboardPointer
) -> None:
    """Slot indexes stay within the ceiling."""
    outcomes = await make_pool(launcher, dashboard).run(spec_invocations(5), ceiling=2)

    assert {o.slot_index for o in outcomes} <= {0, 1}


async def test_non_zero_exit_does_not_stop_siblings(dashboard: DashboardPointer) -> None:
    """A failing process is reported as failed while the others complete."""
    launcher = FakeLauncher(exit_codes={"spec1.cy.ts": 3})

    outcomes = await make_pool(launcher, dashboard).run(spec_invocations(4), ceiling=2)

    assert [o.status for o in outcomes] == ["passed", "failed", "passed", "passed"]
    assert outcomes[1].exit_code == 3
    assert len(launcher.calls) == 4


async def test_launch_error_is_contained(dashboard: DashboardPointer) -> None:
    """An exception while launching becomes an error outcome for that slot only."""
    launcher = FakeLauncher(errors={"spec0.cy.ts": FileNotFoundError("npx not found")})

    outcomes = await make_pool(launcher, dashboard).run(spec_invocations(3), ceiling=1)

    assert outcomes[0].status == "error"
    assert outcomes[0].message == "npx not found"
    assert outcomes[0].exit_code is None
    assert [o.status for o in outcomes[1:]] == ["passed", "passed"]


async def test_stores_dashboard_url(dashboard: DashboardPointer) -> None:
    """A dashboard link printed by a process ends up in the pointer."""
    launcher = FakeLauncher(
        outputs={"spec0.cy.ts": "Recorded Run: https://cloud.cypress.io/projects/p1/runs/9"}
    )

    outcomes = await make_pool(launcher, dashboard).run(spec_invocations(2), ceiling=2)

    assert dashboard.url == "https://cloud.cypress.io/projects/p1/runs/9"
    assert outcomes[0].dashboard_url == dashboard.url
    assert outcomes[1].dashboard_url is None


async def test_dashboard_url_from_any_slot(dashboard: DashboardPointer) -> None:
    """With several links found, one of them is kept."""
    urls = {
        f"spec{i}.cy.ts": f"https://cloud.cypress.io/projects/p1/runs/{i}" for i in range(4)
    }
    launcher = FakeLauncher(outputs=urls)

    await make_pool(launcher, dashboard).run(spec_invocations(4), ceiling=4)

    assert dashboard.url in urls.values()


async def test_missing_dashboard_url_keeps_pointer_empty(
    launcher: FakeLauncher, dashboard: DashboardPointer
) -> None:
    """No link in any output leaves the pointer unset."""
    await make_pool(launcher, dashboard).run(spec_invocations(2), ceiling=2)

    assert dashboard.url is None
