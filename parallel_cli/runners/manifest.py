"""Runner manifest definition for the plugin system."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from parallel_cli.runners.base import TestRunner

ConfigT = TypeVar("ConfigT", bound=BaseModel)


@dataclass(frozen=True, kw_only=True)
class RunnerManifest(Generic[ConfigT]):
    """Manifest describing a runner plugin.

    The manifest holds the runner's configuration class and a factory that
    builds the runner from a validated configuration, so runners can be
    selected by key from the settings file.
    """

    config_cls: type[ConfigT]
    runner_factory: Callable[[ConfigT], TestRunner]
