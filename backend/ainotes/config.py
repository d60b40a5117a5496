from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Optional

DEFAULT_AUTH_SECRET = "change-me"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    HF_API_KEY: Optional[str] = None
    HF_MODEL_URL: str = "https://api-inference.huggingface.co/models/facebook/bart-large-cnn"

    SUMMARY_MAX_LENGTH: int = 150
    SUMMARY_MIN_LENGTH: int = 30
    SUMMARY_CHUNK_WORDS: int = 500
    SUMMARY_MAX_BULLETS: int = Field(8, ge=1, le=8)
    SUMMARY_CONCURRENCY: int = 1
    SUMMARY_TIMEOUT_S: float = 30.0

    AUTH_SECRET: str = DEFAULT_AUTH_SECRET
    AUTH_TOKEN_TTL_S: int = 7 * 24 * 3600

    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

settings = Settings()
