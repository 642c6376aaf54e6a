"""Configuration settings for the store credit risk engine."""
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service identification
    service_name: str = "credit-risk-engine"
    log_level: str = "INFO"

    # Payment-to-credit association used when measuring payment delays.
    # "window" pairs a payment with every credit created within
    # payment_match_window_days of it; "credit_id" uses the payment's credit link.
    payment_matching: Literal["window", "credit_id"] = "window"
    payment_match_window_days: int = 90

    # Language used for recommendation and justification texts
    default_language: Literal["fr", "en"] = "fr"


settings = Settings()
