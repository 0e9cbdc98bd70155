"""Application settings using Pydantic."""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SummarizationProvider(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"
    DEEPSEEK = "deepseek"
    GLM = "glm"
    GENERIC = "generic"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # Provider selection and credentials
    summarization_provider: SummarizationProvider = SummarizationProvider.OPENAI
    summarization_api_key: SecretStr = SecretStr("")
    summarization_endpoint: str = ""
    summarization_model: str = ""

    # Transport behaviour
    summarization_max_attempts: int = 3
    summarization_request_timeout: float = Field(default=60.0, gt=0)
    summarization_deadline_seconds: float | None = None

    # Batch pacing (free tier APIs often allow one request every few seconds)
    summarization_request_delay_seconds: float = 10.0

    # Timezone used when rendering publication timestamps into prompts
    summarization_timezone: str | None = None

    @field_validator("summarization_provider", mode="before")
    @classmethod
    def normalize_provider(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("summarization_max_attempts")
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("summarization_max_attempts must be at least 1")
        return v

    @field_validator("summarization_request_delay_seconds")
    @classmethod
    def validate_request_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("summarization_request_delay_seconds must not be negative")
        return v

    @field_validator("summarization_deadline_seconds")
    @classmethod
    def validate_deadline(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("summarization_deadline_seconds must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
