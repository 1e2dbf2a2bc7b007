from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = Field(default="dev", alias="APP_ENV")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    enable_openapi_docs: bool = Field(default=True, alias="ENABLE_OPENAPI_DOCS")

    google_api_key: str = Field(default="", alias="GOOGLE_GENERATIVE_AI_API_KEY")
    gemini_model: str = Field(default="gemini-1.5-flash", alias="GEMINI_MODEL")
    generation_timeout_seconds: float = Field(default=300.0, alias="GENERATION_TIMEOUT_SECONDS")

    max_upload_bytes: int = Field(default=100 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")
    default_question_count: int = Field(default=4, alias="DEFAULT_QUESTION_COUNT")
    max_question_count: int = Field(default=20, alias="MAX_QUESTION_COUNT")
    quiz_language: str = Field(default="Brazilian Portuguese", alias="QUIZ_LANGUAGE")

    quiz_session_max_active: int = Field(default=1000, alias="QUIZ_SESSION_MAX_ACTIVE")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
