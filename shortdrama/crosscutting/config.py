"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match the outline/script generation behavior

Collaborators:
  - api/main.py: reads settings for CORS and startup logging
  - container.py: reads settings for chunking, concurrency and window sizes
  - interfaces/api/http/routers: reads upload and episode limits

Constraints:
  - Lives in crosscutting, NOT in domain/application
  - No business logic, only configuration

Notes:
  - Singleton via lru_cache
  - FAKE_LLM=1 allows running without a Google API key (tests/CI/dev)
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        google_api_key: Google Gemini API key
        gemini_model: Gemini model id used for every request
        fake_llm: Use the deterministic fake LLM (no network)
        outline_chunk_size: Characters per summarization chunk (default: 100_000)
        outline_max_chunks: Max chunks summarized per novel (default: 20)
        outline_concurrency: Chunk summaries dispatched per batch (default: 3)
        chunk_summary_excerpt_chars: Characters of each chunk sent to the model
        script_min_window_chars: Minimum context window for scripts (default: 150_000)
        script_temperature: Sampling temperature for script generation
        default_episode_count: Episode count when the client sends none
        max_episode_count: Upper bound accepted by the HTTP layer
        max_upload_bytes: Maximum novel file size
        max_body_bytes: Maximum request body size
        max_projects: Projects kept in memory (oldest evicted first)
        prompt_version: Prompt template version (v1, v2, ...)
        prompt_lang: Prompt template language suffix

    Note:
        LOG_LEVEL / LOG_JSON are read by crosscutting.logger straight from
        the environment (the logger is built before Settings validates).
    """

    # Environment
    app_env: str = "development"

    # LLM provider
    google_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    fake_llm: bool = False

    # Outline generation (chunk → summarize → outline)
    outline_chunk_size: int = 100_000
    outline_max_chunks: int = 20
    outline_concurrency: int = 3
    chunk_summary_excerpt_chars: int = 40_000

    # Script generation (context window)
    script_min_window_chars: int = 150_000
    script_temperature: float = 0.7

    # Episode limits
    default_episode_count: int = 40
    max_episode_count: int = 100

    # Upload / hardening
    max_upload_bytes: int = 30 * 1024 * 1024
    max_body_bytes: int = 32 * 1024 * 1024
    max_projects: int = 50

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"

    # Prompts
    prompt_version: str = "v1"
    prompt_lang: str = "zh"

    # Retry/Resilience
    retry_max_attempts: int = 3
    retry_base_delay_seconds: float = 1.0
    retry_max_delay_seconds: float = 30.0

    @field_validator(
        "outline_chunk_size",
        "outline_max_chunks",
        "outline_concurrency",
        "chunk_summary_excerpt_chars",
        "script_min_window_chars",
        "default_episode_count",
        "max_episode_count",
        "max_upload_bytes",
        "max_body_bytes",
        "max_projects",
        "retry_max_attempts",
    )
    @classmethod
    def must_be_positive(cls, v: int, info) -> int:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be greater than 0")
        return v

    @field_validator("script_temperature")
    @classmethod
    def temperature_in_range(cls, v: float) -> float:
        if v < 0 or v > 2:
            raise ValueError("script_temperature must be between 0 and 2")
        return v

    @model_validator(mode="after")
    def validate_episode_limits(self):
        if self.default_episode_count > self.max_episode_count:
            raise ValueError(
                f"default_episode_count ({self.default_episode_count}) must be <= "
                f"max_episode_count ({self.max_episode_count})"
            )
        return self

    @model_validator(mode="after")
    def validate_ai_requirements(self):
        if not self.google_api_key and not self.fake_llm:
            raise ValueError("GOOGLE_API_KEY is required unless FAKE_LLM=1")
        return self

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
