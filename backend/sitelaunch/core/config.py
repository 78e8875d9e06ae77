from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # core
    ENV: str = "dev"
    API_PREFIX: str = "/api"

    # database & redis
    # Plain strings so sqlite:// and redis:// URLs are always accepted
    DATABASE_URL: str
    REDIS_URL: str

    # auth / security
    API_AUTH_KEY: str | None = None
    FRONTEND_ORIGIN: str | None = None
    # Explicit debug-only switch for wide-open CORS in non-prod envs
    CORS_ALLOW_ALL_ORIGINS: bool = False

    # content generation (OpenAI-compatible endpoint)
    OPENROUTER_API_KEY: str | None = None
    OPENAI_API_KEY: str | None = None
    LLM_MODEL: str = "openai/gpt-4.1"
    LLM_MAX_TOKENS: int = 4096
    LLM_TIMEOUT_SECONDS: int = 60
    # Hard cap on concurrent LLM calls per process
    LLM_MAX_CONCURRENCY: int = 4

    # hosting provider
    NETLIFY_API_TOKEN: str | None = None
    NETLIFY_API_URL: str = "https://api.netlify.com/api/v1"
    NETLIFY_TIMEOUT_SECONDS: int = 60

    # deployment target naming
    SITE_NAME_PREFIX: str = "site"
    SITE_NAME_MAX_LEN: int = 63

    # downstream workflow webhook
    N8N_WEBHOOK_URL: str | None = None
    N8N_TIMEOUT_SECONDS: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
