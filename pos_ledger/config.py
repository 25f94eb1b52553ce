"""Configuration management using Pydantic Settings"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="POS_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Storage
    data_file: Path = Path("pos_data.json")
    persist_max_retries: int = 3

    # Service
    service_name: str = "pos-ledger"
    log_level: str = "INFO"
    currency: str = "LKR"

    # Behaviour
    strict_cheque_transitions: bool = False
    recent_sales_limit: int = 5


settings = Settings()
