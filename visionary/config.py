from pydantic_settings import BaseSettings
from functools import lru_cache
from pathlib import Path


class Settings(BaseSettings):
    # App settings
    app_name: str = "Visionary AI Image Studio"
    debug: bool = False
    log_level: str = "INFO"

    # Local storage for downloaded images
    storage_path: Path = Path("temp/storage")

    # Gemini (Nano Banana) API settings
    gemini_api_key: str = ""
    gemini_api_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    gemini_model: str = "gemini-2.5-flash-image"
    request_timeout_seconds: float = 120.0

    # Session settings
    status_interval_seconds: float = 3.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
