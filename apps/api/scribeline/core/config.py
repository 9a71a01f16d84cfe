"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    auth_provider: Literal["mock", "firebase"] = "firebase"
    firebase_project_id: str | None = None
    firebase_audience: str | None = None

    assemblyai_api_key: str = ""
    assemblyai_base_url: str = "https://api.assemblyai.com"
    assemblyai_speech_model: str = "nano"
    provider_timeout_seconds: float = 30.0

    extractor_url: str | None = None
    extractor_timeout_seconds: float = 60.0

    storage_bucket: str = "transcriptions"
    storage_endpoint_url: str | None = None
    storage_region: str | None = None
    signed_url_ttl_seconds: int = 3600

    trial_transcription_limit: int = 3
    trial_length_days: int = 7
    trial_max_upload_mb: int = 100
    paid_max_upload_mb: int = 5 * 1024

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="SCRIBELINE_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
