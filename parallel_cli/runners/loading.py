"""Loading of test runners from entry points."""

from collections.abc import Mapping
from importlib.metadata import entry_points
from typing import Any

from pydantic import ValidationError

from parallel_cli.errors import ConfigInvalidError, RunnerNotFoundError
from parallel_cli.runners.base import TestRunner
from parallel_cli.runners.manifest import RunnerManifest

ENTRY_POINT_GROUP = "parallel_cli.runners"


def load_runner_manifest(key: str) -> RunnerManifest[Any]:
    """Load a runner manifest by key.

    Args:
        key: The runner key as registered in pyproject.toml (e.g., "cypress")

    Returns:
        The runner manifest instance

    Raises:
        RunnerNotFoundError: If no runner with the given key is found

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == key:
            manifest: RunnerManifest[Any] = entry.load()
            return manifest

    available = [e.name for e in entries]
    raise RunnerNotFoundError(
        f"Runner '{key}' not found. Available runners: {available}"
    )


def create_runner(key: str, config: Mapping[str, Any]) -> TestRunner:
    """Load the runner registered under ``key`` and build it from ``config``.

    Raises:
        RunnerNotFoundError: If no runner with the given key is found
        ConfigInvalidError: If ``config`` is not valid for the runner

    """
    manifest = load_runner_manifest(key)
    try:
        runner_config = manifest.config_cls(**config)
    except ValidationError as exc:
        raise ConfigInvalidError(
            f"Invalid configuration for runner '{key}': {exc}"
        ) from exc
    return manifest.runner_factory(runner_config)
