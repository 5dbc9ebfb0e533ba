"""Configuration for the Cypress runner."""

from collections.abc import Sequence

from pydantic import BaseModel, Field


class CypressConfig(BaseModel):
    """Configuration for the Cypress runner."""

    command: Sequence[str] = ("npx", "cypress", "run")
    base_dir: str = "cypress"
    reporter: str = "./parallel-cli-reporter.js"
    spec_patterns: Sequence[str] = Field(default=("*.cy.ts", "*.cy.js"), min_length=1)
    tag: str = "parallel-cli"
