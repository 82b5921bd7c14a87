"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Product/inventory service
    inventory_api_base_url: str = "http://localhost:8000/api"
    inventory_api_token: str = ""
    inventory_api_timeout: float = 30.0  # seconds

    # Reject warehouses placed into a pool of the wrong type
    enforce_slot_types: bool = False

    # Application
    debug: bool = False


settings = Settings()
