"""Cypress runner implementation."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path, PurePath

from parallel_cli.models.config import RunConfig
from parallel_cli.models.invocation import Invocation
from parallel_cli.runners.base import TestRunner
from parallel_cli.runners.cypress.config import CypressConfig


@dataclass(frozen=True, kw_only=True)
class CypressRunner(TestRunner):
    """Launches ``cypress run`` once per slot."""

    config: CypressConfig

    @classmethod
    def from_config(cls, config: CypressConfig) -> "CypressRunner":
        return cls(config=config)

    @property
    def spec_dir(self) -> PurePath:
        return PurePath(self.config.base_dir)

    @property
    def spec_patterns(self) -> Sequence[str]:
        return tuple(self.config.spec_patterns)

    def build_invocation(
        self,
        config: RunConfig,
        browser: str,
        specs: Path | str,
        build_id: str,
    ) -> Invocation:
        """Build the cypress command line.

        Flags are always emitted in the same order: env, spec, browser,
        reporter, then the recording flags. Every invocation of a recorded
        run carries the same ``--ci-build-id`` so the dashboard groups them.
        """
        args = list(self.config.command)

        if config.env_vars:
            args += ["--env", config.env_vars]
        args += ["--spec", str(specs)]
        args += ["--browser", browser]
        args += ["--reporter", self.config.reporter]

        if config.record_key:
            args += ["--group", browser, "--record", "--key", config.record_key]
            args += ["--parallel", "--ci-build-id", build_id]
            if config.preset_tag:
                args += ["--tag", f"{self.config.tag},{config.preset_tag}"]

        return Invocation(
            args=tuple(args),
            browser=browser,
            spec_file=specs if isinstance(specs, Path) else None,
        )
