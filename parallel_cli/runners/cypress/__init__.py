"""Cypress runner module."""

from parallel_cli.runners.cypress.config import CypressConfig
from parallel_cli.runners.cypress.manifest import cypress_manifest
from parallel_cli.runners.cypress.runner import CypressRunner

__all__ = ["CypressConfig", "CypressRunner", "cypress_manifest"]
