"""Resolved, read-only configuration for one orchestrated run."""

import re
from collections.abc import Sequence

from pydantic import Field, ValidationError, field_validator

from parallel_cli.errors import ConfigInvalidError
from parallel_cli.models.base import Model

MAX_PARALLEL = 20
DEFAULT_PARALLEL = 5

RECORD_KEY_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


class RunConfig(Model):
    """Configuration consumed by every stage of a run.

    Built once per run from the persisted settings (plus an optional preset
    overlay) and passed explicitly to the controller, never mutated.
    """

    browsers: Sequence[str] = Field(..., min_length=1)
    spec_suites: Sequence[str] = Field(..., min_length=1)
    env_vars: str | None = None
    record_key: str | None = None
    parallelism: int = Field(default=DEFAULT_PARALLEL, ge=1, le=MAX_PARALLEL)
    preset_tag: str | None = None

    @field_validator("browsers")
    @classmethod
    def _dedupe_browsers(cls, browsers: Sequence[str]) -> Sequence[str]:
        """Browsers are an ordered set: keep the first occurrence of each."""
        cleaned = [b.strip() for b in browsers if b.strip()]
        if not cleaned:
            raise ValueError("at least one browser is required")
        return tuple(dict.fromkeys(cleaned))

    @field_validator("spec_suites")
    @classmethod
    def _strip_suites(cls, suites: Sequence[str]) -> Sequence[str]:
        cleaned = tuple(s.strip() for s in suites if s.strip())
        if not cleaned:
            raise ValueError("at least one spec suite is required")
        return cleaned

    @field_validator("env_vars", "preset_tag")
    @classmethod
    def _blank_is_unset(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("record_key")
    @classmethod
    def _check_record_key(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        if not RECORD_KEY_PATTERN.match(value.strip()):
            raise ValueError("record key should match uuid format")
        return value.strip()

    @property
    def recorded(self) -> bool:
        """Whether spec partitioning is delegated to the recording service."""
        return self.record_key is not None

    @classmethod
    def create(cls, **values: object) -> "RunConfig":
        """Validate values into a RunConfig, raising ConfigInvalidError."""
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigInvalidError(f"Invalid run configuration: {exc}") from exc
