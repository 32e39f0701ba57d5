from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # AI
    ai_mode: str = "mock"  # "mock" or "gemini"
    gemini_api_key: Optional[str] = None
    gemini_text_model: str = "gemini-3-flash-preview"
    gemini_grounding_model: str = "gemini-2.5-flash"
    gemini_image_model: str = "gemini-2.5-flash-image"
    gemini_video_model: str = "veo-3.1-fast-generate-preview"

    # Plan shape
    meal_plan_days: int = 3
    workout_plan_days: int = 5
    venue_link_limit: int = 3

    # Media
    image_aspect_ratio: str = "16:9"
    video_resolution: str = "720p"
    video_aspect_ratio: str = "16:9"
    video_poll_interval_sec: float = 8.0
    video_max_polls: int = 60

    # Session cache
    cache_backend: str = "memory"  # "memory" or "redis"
    redis_url: str = "redis://localhost:6379/0"
    cache_key_prefix: str = "vitality:artifact"

    # HTTP
    rate_limit_default: str = "60/minute"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    @field_validator("video_poll_interval_sec")
    @classmethod
    def _positive_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("video_poll_interval_sec must be greater than zero")
        return value


settings = Settings()
