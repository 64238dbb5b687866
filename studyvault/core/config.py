from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (course and assignment records created from parsed syllabi)
    database_url: str = "sqlite:///./studyvault.db"

    # LLM API Keys (optional, the AI fallback checks before use)
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # AI fallback extraction
    ai_model: str = "mistralai/mistral-small-latest"
    ai_temperature: float = 0.1
    ai_max_tokens: int = 2000
    ai_timeout_seconds: int = 30
    ai_max_input_chars: int = 4000

    # Syllabus uploads
    min_text_length: int = 100  # shorter extractions are not meaningful
    max_upload_mb: int = 10

    # App settings
    app_name: str = "StudyVault"
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
