"""Shared fixtures for unit tests."""

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from parallel_cli.dashboard import DashboardPointer
from parallel_cli.models.invocation import Invocation
from parallel_cli.process import ProcessOutcome


@dataclass(kw_only=True)
class FakeLauncher:
    """Launcher double that tracks concurrency instead of spawning processes.

    Behaviour is keyed by the invocation's spec file name (or browser for
    grouped invocations).
    """

    delay: float = 0.01
    delays: Mapping[str, float] = field(default_factory=dict)
    exit_codes: Mapping[str, int] = field(default_factory=dict)
    outputs: Mapping[str, str] = field(default_factory=dict)
    errors: Mapping[str, Exception] = field(default_factory=dict)
    on_launch: Callable[[Invocation], None] | None = None

    calls: list[Invocation] = field(default_factory=list)
    starts: dict[str, float] = field(default_factory=dict)
    finishes: dict[str, float] = field(default_factory=dict)
    active: int = 0
    max_active: int = 0

    async def __call__(self, invocation: Invocation) -> ProcessOutcome:
        key = invocation.spec_file.name if invocation.spec_file else invocation.browser
        loop = asyncio.get_running_loop()
        started_at = loop.time()
        self.calls.append(invocation)
        self.starts[key] = started_at

        if key in self.errors:
            raise self.errors[key]

        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delays.get(key, self.delay))
            if self.on_launch is not None:
                self.on_launch(invocation)
        finally:
            self.active -= 1

        finished_at = loop.time()
        self.finishes[key] = finished_at
        return ProcessOutcome(
            exit_code=self.exit_codes.get(key, 0),
            output=self.outputs.get(key, ""),
            started_at=started_at,
            finished_at=finished_at,
        )


@pytest.fixture
def launcher() -> FakeLauncher:
    """Create a fake launcher with default behaviour."""
    return FakeLauncher()


@pytest.fixture
def dashboard() -> DashboardPointer:
    """Create an in-memory dashboard pointer."""
    return DashboardPointer()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a project with three specs below cypress/e2e."""
    suite = tmp_path / "cypress" / "e2e"
    (suite / "login").mkdir(parents=True)
    (suite / "login" / "login.cy.ts").write_text("describe()")
    (suite / "login" / "logout.cy.js").write_text("describe()")
    (suite / "checkout.cy.ts").write_text("describe()")
    (suite / "helpers.ts").write_text("export {}")
    return tmp_path
