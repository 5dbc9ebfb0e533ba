"""Cypress runner manifest."""

from parallel_cli.runners.cypress.config import CypressConfig
from parallel_cli.runners.cypress.runner import CypressRunner
from parallel_cli.runners.manifest import RunnerManifest

cypress_manifest = RunnerManifest(
    config_cls=CypressConfig,
    runner_factory=CypressRunner.from_config,
)
