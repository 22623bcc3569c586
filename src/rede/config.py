"""Runtime settings for the rede command line."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings, e.g. ``REDE_LOG_LEVEL=DEBUG``."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="REDE_", extra="ignore")

    log_level: str = "WARNING"
    output_format: Literal["yaml", "json"] = "yaml"


@lru_cache
def get_settings() -> Settings:
    return Settings()
