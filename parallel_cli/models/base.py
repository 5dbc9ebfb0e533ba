"""Base model configuration for configuration and result records."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable base model shared by settings, run config and records."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)
