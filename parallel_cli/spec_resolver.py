"""Discover the spec files that make up a run."""

import logging
from collections.abc import Sequence
from pathlib import Path, PurePath

from parallel_cli.errors import EmptyResultSetError

log = logging.getLogger(__name__)

DEFAULT_SPEC_PATTERNS = ("*.cy.ts", "*.cy.js")


def resolve_specs(
    suites: Sequence[str],
    root_dir: Path,
    patterns: Sequence[str] = DEFAULT_SPEC_PATTERNS,
) -> Sequence[Path]:
    """Find every spec file below the given suite directories.

    Args:
        suites: Suite directories relative to ``root_dir`` (e.g., ["e2e/login"])
        root_dir: Directory the suites are resolved against
        patterns: File name patterns identifying spec files

    Returns:
        Absolute spec paths, each listed once even when two suites overlap.

    Raises:
        EmptyResultSetError: If no spec file was found in any suite

    """
    specs: set[Path] = set()

    for suite in suites:
        suite_dir = (root_dir / suite).resolve()
        if not suite_dir.is_dir():
            log.warning("Suite directory %s does not exist", suite_dir)
            continue

        for pattern in patterns:
            specs.update(p.resolve() for p in suite_dir.rglob(pattern) if p.is_file())

    if not specs:
        raise EmptyResultSetError(
            f"No specs found on selected suites: {', '.join(suites)}"
        )

    log.info("Discovered %d spec file(s) in %d suite(s)", len(specs), len(suites))
    return sorted(specs)


def spec_group(suites: Sequence[str], base_dir: PurePath) -> str:
    """Join suite paths into the single spec selector used by recorded runs.

    No file-level discovery happens here: the recording service partitions
    the specs across the parallel processes itself.
    """
    return ",".join((base_dir / suite).as_posix() for suite in suites)
