from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class Settings(BaseSettings):
    """Runtime configuration, read from PAYMENTS_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PAYMENTS_",
        extra="ignore",
    )

    # Report rejected rows and transactions on stderr.
    print_errors: bool = True
    log_level: LogLevel = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache
def load_settings() -> Settings:
    return Settings()
