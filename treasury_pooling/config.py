"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./treasury_pooling.db"

    # Service
    service_name: str = "treasury-pooling"
    log_level: str = "INFO"

    # Pooling
    rtc_location: str = "Singapore"  # Must be a freely convertible country
    default_target_currency: str = "USD"

    # What-if defaults, annualized percentages
    default_fx_haircut_pct: float = 0.0
    default_blended_credit_rate_pct: float = 0.0
    default_usd_debit_rate_pct: float = 0.0


settings = Settings()
