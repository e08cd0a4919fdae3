"""Centralised application settings loaded from environment / .env file."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite+aiosqlite:///./transfers.db"
    database_echo: bool = False

    # Matching
    default_max_distance_km: float = 100.0  # applied when a profile omits it

    # Logging
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_prefix": "TRANSFER_", "extra": "ignore"}


def get_settings() -> Settings:
    return Settings()


settings = get_settings()
