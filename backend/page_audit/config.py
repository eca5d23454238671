from pydantic_settings import BaseSettings
from functools import lru_cache
import os


class Settings(BaseSettings):
    anthropic_api_key: str = ""

    # Model defaults
    default_model: str = "claude-sonnet-4-5-20250929"
    ai_max_tokens: int = 1000
    ai_request_timeout: float = 60.0  # seconds, per category request
    solution_max_tokens: int = 800

    # Capture defaults
    viewport_width: int = 1920
    viewport_height: int = 1080
    page_load_timeout: int = 30000  # milliseconds
    scroll_step: int = 100  # px per auto-scroll tick
    scroll_interval: int = 100  # milliseconds between ticks

    # Screenshot sent to the model (the stored screenshot is never resized)
    ai_image_max_width: int = 1280
    ai_image_max_height: int = 7800
    ai_image_quality: int = 75

    # Heuristic thresholds
    large_image_threshold: int = 1000  # px
    min_paragraphs: int = 3

    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    class Config:
        # Look for .env in the repo root (two levels up from backend/page_audit/)
        _env_path = os.path.join(os.path.dirname(__file__), "..", "..", ".env")
        env_file = _env_path if os.path.exists(_env_path) else None
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings():
    return Settings()
