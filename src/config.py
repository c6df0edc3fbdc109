"""Centralised application settings loaded from environment / .env file."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Storage
    store_backend: str = "memory"  # "memory" | "sql"
    database_url: str = "sqlite+aiosqlite:///./herbtrace.db"

    # Batches
    batch_id_prefix: str = "ASH"
    default_unit: str = "kg"
    verify_base_url: str = "https://ayur-trace.com/verify"

    # Compliance
    report_issuer: str = "AYUSH Compliance System"

    # Runtime
    seed_demo_data: bool = True
    rate_limit: str = "100/minute"
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
