"""
Runtime settings using pydantic-settings.
All environment access in ksense_assessment/ should go through this module.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://assessment.ksensetech.com/api"


class Settings(BaseSettings):
    # API
    API_KEY: str = ""
    API_BASE_URL: str = DEFAULT_BASE_URL
    PAGE_LIMIT: int = 20
    MAX_RETRIES: int = 5
    REQUEST_TIMEOUT: float = 30

    # Scoring
    HIGH_RISK_THRESHOLD: int = 4

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
