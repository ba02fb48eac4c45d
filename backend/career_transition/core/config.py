from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Career Transition API"
    app_version: str = "0.1.0"
    database_url: str
    database_echo: bool = False
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    auth_secret: str = "change-me-auth-secret"
    auth_token_ttl_seconds: int = 60 * 60 * 24 * 7
    auth_login_max_attempts: int = 8
    auth_login_window_seconds: int = 60 * 10
    ai_enabled: bool = True
    ai_rate_limit_per_minute: int = 20
    llm_provider: str = "anthropic"
    llm_timeout_seconds: float = 120.0
    anthropic_api_key: str | None = None
    anthropic_model: str = "claude-sonnet-4-20250514"
    anthropic_api_base: str = "https://api.anthropic.com/v1"
    anthropic_version: str = "2023-06-01"
    openai_api_key: str | None = None
    openai_model: str = "gpt-5-mini"
    openai_api_base: str = "https://api.openai.com/v1"
    groq_api_key: str | None = None
    groq_model: str = "llama-3.1-8b-instant"
    groq_api_base: str = "https://api.groq.com/openai/v1"
    log_level: str = "INFO"
    log_format: str = "text"

    @field_validator("database_url", mode="before")
    @classmethod
    def normalize_database_url(cls, value: str) -> str:
        # Render/Postgres providers often expose postgres:// URLs.
        if isinstance(value, str) and value.startswith("postgres://"):
            return "postgresql://" + value[len("postgres://"):]
        return value

settings = Settings()
