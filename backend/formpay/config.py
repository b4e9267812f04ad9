"""
Application Configuration — Environment & Settings
Centralizes all config from .env with Pydantic Settings for validation.
"""
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve paths relative to backend/ directory
BASE_DIR = Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class GatewayConfig:
    """PayU credentials and endpoint for one deployment mode."""

    key: str
    salt: str
    url: str
    production: bool


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # --- Core ---
    APP_NAME: str = "Stock Website Backend API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # "production" switches PayU to live credentials

    # --- Database ---
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'data' / 'stock_website.db'}"
    DB_TIMEOUT_SECONDS: int = 15

    # --- PayU ---
    PAYU_PRODUCTION_KEY: str = ""
    PAYU_PRODUCTION_SALT: str = ""
    PAYU_TEST_KEY: str = ""
    PAYU_TEST_SALT: str = ""
    PAYU_PRODUCTION_URL: str = "https://secure.payu.in/_payment"
    PAYU_TEST_URL: str = "https://test.payu.in/_payment"
    PAYU_VERIFY_FAILURE_CALLBACK: bool = False
    PRODUCT_NAME: str = "Stock Website"

    # --- URLs ---
    BASE_URL: str = "http://localhost:5000"
    FRONTEND_URL: str = "https://tradingwalla.com"

    # --- Email ---
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    SMTP_USE_SSL: bool = True
    SMTP_TIMEOUT_SECONDS: int = 10
    EMAIL_USER: str = ""
    EMAIL_PASS: str = ""
    ADMIN_EMAIL: str = ""

    # --- Security ---
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "https://tradingwalla.com",
        "https://secure.payu.in",
        "https://test.payu.in",
    ]

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "production"

    def gateway(self) -> GatewayConfig:
        """Resolve the PayU credentials for the current deployment mode."""
        if self.is_production:
            return GatewayConfig(
                key=self.PAYU_PRODUCTION_KEY,
                salt=self.PAYU_PRODUCTION_SALT,
                url=self.PAYU_PRODUCTION_URL,
                production=True,
            )
        return GatewayConfig(
            key=self.PAYU_TEST_KEY,
            salt=self.PAYU_TEST_SALT,
            url=self.PAYU_TEST_URL,
            production=False,
        )


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
