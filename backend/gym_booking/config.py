"""Application configuration management."""
import os
from pathlib import Path
from typing import List, Set

from pydantic_settings import BaseSettings, SettingsConfigDict


CASHFREE_BASE_URLS = {
    "sandbox": "https://sandbox.cashfree.com/pg",
    "production": "https://api.cashfree.com/pg",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 4000
    debug: bool = True

    # Public URL of this API (used by the frontend, the CLI and checkout links)
    api_base_url: str = "http://localhost:4000"

    # Comma separated bearer tokens. Empty accepts any non-empty token.
    api_tokens: str = ""

    # Comma separated browser origins allowed by CORS
    cors_origins: str = "*"

    # Storage Configuration
    storage_base_path: str = "/tmp/data" if os.getenv("SPACE_ID") else "./data"

    # HTTP Configuration
    default_timeout: int = 30

    # Cashfree Payment Gateway
    cashfree_app_id: str = ""  # Required - set via CASHFREE_APP_ID env var
    cashfree_secret_key: str = ""  # Required - set via CASHFREE_SECRET_KEY env var
    cashfree_mode: str = "sandbox"  # "sandbox" or "production"
    cashfree_api_version: str = "2023-08-01"
    payment_return_url: str = "http://localhost:7860/?order_id={order_id}"

    # Model Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def storage_path(self) -> Path:
        """Get the resolved storage path."""
        return Path(self.storage_base_path).expanduser().resolve()

    @property
    def allowed_tokens(self) -> Set[str]:
        """Get the configured bearer tokens."""
        return {token.strip() for token in self.api_tokens.split(",") if token.strip()}

    @property
    def cors_origin_list(self) -> List[str]:
        """Get the configured CORS origins."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def cashfree_base_url(self) -> str:
        """Get the Cashfree PG base URL for the configured mode."""
        return CASHFREE_BASE_URLS.get(self.cashfree_mode, CASHFREE_BASE_URLS["sandbox"])


# Global settings instance
settings = Settings()
