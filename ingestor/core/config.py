import os
from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_PORT = 1024
MAX_PORT = 65535


class ConfigError(ValueError):
    """Raised when process configuration cannot be resolved."""


def get_env_var(key: str, default: Optional[str] = None) -> str:
    """
    Read an environment variable.
    Empty values fall back to the default; a missing variable without a
    default is a configuration error.
    """
    value = os.getenv(key)
    if not value and default is None:
        raise ConfigError(f"Environment variable {key} is not set")
    return value or default


def parse_port(value) -> int:
    try:
        port = int(str(value).strip(), 10)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid PORT_NUMBER: {value}")
    if port < MIN_PORT or port > MAX_PORT:
        raise ConfigError(f"Invalid PORT_NUMBER: {value}")
    return port


class Settings(BaseSettings):
    PORT_NUMBER: int = 3000
    DATA_LOCATION: str = "./data"
    HOST: str = "0.0.0.0"
    LOG_LEVEL: str = "INFO"
    ENABLE_PROMETHEUS_METRICS: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore", frozen=True)

    @field_validator("PORT_NUMBER", mode="before")
    @classmethod
    def _check_port(cls, value):
        return parse_port(value)


@lru_cache
def get_settings() -> Settings:
    """Build the process settings once; invalid values abort startup."""
    return Settings()
