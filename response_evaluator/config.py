"""Application configuration via Pydantic Settings.

NOTE: We explicitly map the .env variable names (HELPSCOUT_APP_ID,
OPENAI_API_KEY, OPENAI_MODEL, etc.) to avoid silent misconfiguration.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings


class CachedResultDetail(str, Enum):
    FULL = "full"
    SUMMARY = "summary"


class Settings(BaseSettings):
    # Help Scout
    helpscout_access_token: str = Field(default="", validation_alias="HELPSCOUT_ACCESS_TOKEN")
    helpscout_app_id: str = Field(default="", validation_alias="HELPSCOUT_APP_ID")
    helpscout_app_secret: str = Field(default="", validation_alias="HELPSCOUT_APP_SECRET")
    helpscout_signing_secret: str = Field(
        default="",
        validation_alias="HELPSCOUT_APP_SIGNING_SECRET",
    )
    helpscout_base_url: str = Field(
        default="https://api.helpscout.net/v2",
        validation_alias="HELPSCOUT_BASE_URL",
    )
    helpscout_timeout: float = Field(default=10.0, validation_alias="HELPSCOUT_TIMEOUT")
    helpscout_max_pages: int = Field(default=5, validation_alias="HELPSCOUT_MAX_PAGES")

    # OpenAI
    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o-mini", validation_alias="OPENAI_MODEL")
    openai_temperature: float = Field(default=0.3, validation_alias="OPENAI_TEMPERATURE")
    openai_max_tokens: int = Field(default=1000, validation_alias="OPENAI_MAX_TOKENS")

    # Evaluation pipeline
    evaluation_timeout_seconds: float = Field(
        default=7.0,
        validation_alias="EVALUATION_TIMEOUT_SECONDS",
    )
    context_thread_limit: int = Field(default=5, validation_alias="CONTEXT_THREAD_LIMIT")

    # Verdict cache
    cache_retention_days: int = Field(default=30, validation_alias="CACHE_RETENTION_DAYS")
    cache_eviction_interval_seconds: float = Field(
        default=3600.0,
        validation_alias="CACHE_EVICTION_INTERVAL_SECONDS",
    )

    # Rendering
    cached_result_detail: CachedResultDetail = Field(
        default=CachedResultDetail.FULL,
        validation_alias="CACHED_RESULT_DETAIL",
    )

    # App
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
