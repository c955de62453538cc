"""Configuration management using Pydantic Settings"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Durable store
    store_backend: Literal["file", "sql"] = "file"
    users_file: str = "./users.txt"
    accounts_file: str = "./accounts.txt"
    database_url: str = "sqlite:///./payment_gateway.db"

    # Admin API
    admin_secret: str = "SuperSecret123"

    # Responses
    txn_timezone: str = "Asia/Kolkata"

    # Service
    service_name: str = "payment-gateway"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000


settings = Settings()
