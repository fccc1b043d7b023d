"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "billing-engine"
    log_level: str = "INFO"

    # Recurring schedules
    max_recurring_cycles: int = 120  # hard cap on materialized cycles per request
    default_horizon_months: int = 12

    # Idempotent replay of schedule requests
    idempotency_ttl_seconds: float = 300.0


settings = Settings()
