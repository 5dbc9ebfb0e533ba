"""Fixtures for integration tests running real processes."""

import json
import sys
from pathlib import Path

import pytest

FAKE_RUNNER = '''
import json
import re
import sys
from datetime import datetime, timezone
from pathlib import Path

args = sys.argv[1:]
spec = args[args.index("--spec") + 1]
browser = args[args.index("--browser") + 1]
name = Path(spec).name

print(f"Running {name} on {browser}", flush=True)
print("warming up", file=sys.stderr, flush=True)

if "crash" in name:
    sys.exit(2)

failures = 1 if "failing" in name else 0
record = {
    "file": spec,
    "start": datetime.now(timezone.utc).isoformat(),
    "tests": 2,
    "passes": 2 - failures,
    "failures": failures,
    "duration": 250,
}
results = Path.cwd() / "parallel-cli-results"
results.mkdir(exist_ok=True)
(results / (re.sub(r"[\\\\/]", "_", spec) + ".json")).write_text(json.dumps(record))

print("Recorded Run: https://cloud.cypress.io/projects/abc/runs/5", flush=True)
sys.exit(failures)
'''


@pytest.fixture
def fake_runner(tmp_path: Path) -> Path:
    """Write a script that behaves like a runner with the results reporter."""
    script = tmp_path / "fake_runner.py"
    script.write_text(FAKE_RUNNER)
    return script


@pytest.fixture
def project_dir(tmp_path: Path, fake_runner: Path) -> Path:
    """Create a project with specs and settings pointing at the fake runner."""
    project = tmp_path / "project"
    suite = project / "cypress" / "e2e"
    suite.mkdir(parents=True)
    for name in ("home.cy.ts", "cart.cy.js", "failing.cy.ts", "crash.cy.ts"):
        (suite / name).write_text("describe()")

    command = json.dumps([sys.executable, str(fake_runner)])
    (project / "parallel-cli.yaml").write_text(
        f"""
browsers: [chromeA, chromeB]
specs: [e2e]
parallel: 2
runner_config:
  command: {command}
"""
    )
    return project
