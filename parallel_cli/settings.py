"""Persisted settings and their resolution into a run configuration."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError

from parallel_cli.collector import DEFAULT_RESULTS_DIR
from parallel_cli.errors import ConfigInvalidError, PresetNotFoundError
from parallel_cli.models.base import Model
from parallel_cli.models.config import DEFAULT_PARALLEL, RunConfig

log = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILENAME = "parallel-cli.yaml"
DEFAULT_SPECS = ("e2e",)
DEFAULT_BROWSERS = ("electron",)


class Preset(Model):
    """Named snapshot of run settings."""

    name: str = Field(..., min_length=1)
    record_key: str | None = None
    specs: Sequence[str] = DEFAULT_SPECS
    env_vars: str | None = None
    browsers: Sequence[str] = DEFAULT_BROWSERS
    parallel: int = DEFAULT_PARALLEL


class Settings(Model):
    """Contents of the settings file.

    Top-level run fields are the current settings; ``preset`` selects one of
    ``presets`` to use instead when no preset is named on the command line.
    """

    preset: str | None = None
    presets: Sequence[Preset] = ()
    record_key: str | None = None
    specs: Sequence[str] = DEFAULT_SPECS
    env_vars: str | None = None
    browsers: Sequence[str] = DEFAULT_BROWSERS
    parallel: int = DEFAULT_PARALLEL
    runner: str = "cypress"
    runner_config: Mapping[str, Any] = Field(default_factory=dict)
    results_dir: str = DEFAULT_RESULTS_DIR

    def find_preset(self, name: str) -> Preset | None:
        return next((p for p in self.presets if p.name == name), None)


async def load_settings(path: Path) -> Settings:
    """Load settings from a YAML file; a missing file means defaults.

    Raises:
        ConfigInvalidError: If the file is not valid YAML or fails validation

    """
    if not path.exists():
        log.info("Settings file %s not found, using defaults", path)
        return Settings()

    content = await asyncio.to_thread(path.read_text, encoding="utf-8")

    try:
        data = yaml.safe_load(content) or {}
        return Settings.model_validate(data)
    except (yaml.YAMLError, ValidationError) as exc:
        raise ConfigInvalidError(f"Invalid settings file {path}: {exc}") from exc


def resolve_run_config(
    settings: Settings,
    preset_name: str | None = None,
    *,
    recorded: bool = True,
) -> RunConfig:
    """Build the run configuration from settings and an optional preset.

    Args:
        settings: Loaded settings
        preset_name: Preset requested on the command line; falls back to
            the preset selected in the settings
        recorded: When False the record key is dropped so the run is not
            recorded even if a key is configured

    Raises:
        PresetNotFoundError: If ``preset_name`` does not name a preset
        ConfigInvalidError: If the resulting configuration is invalid

    """
    if preset_name is not None and settings.find_preset(preset_name) is None:
        raise PresetNotFoundError(
            f'Preset "{preset_name}" was not found in cli presets'
        )

    preset = settings.find_preset(preset_name or settings.preset or "")
    source: Preset | Settings = preset if preset is not None else settings
    if preset is not None:
        log.info("Using preset %s", preset.name)

    return RunConfig.create(
        browsers=source.browsers,
        spec_suites=source.specs,
        env_vars=source.env_vars,
        record_key=source.record_key if recorded else None,
        parallelism=source.parallel,
        preset_tag=preset.name if preset is not None else None,
    )
