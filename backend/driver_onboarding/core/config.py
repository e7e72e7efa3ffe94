"""
Pydantic Settings: centralized configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database (individual vars) ──
    POSTGRES_USER: str = "drivers_user"
    POSTGRES_PASSWORD: str = "drivers_pass"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "drivers_db"

    # Full async URL, e.g. "sqlite+aiosqlite:///./drivers.db" for local runs
    DATABASE_URL_OVERRIDE: str = ""

    @property
    def DATABASE_URL(self) -> str:
        """Async URL for app runtime (asyncpg unless overridden)."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # ── Redis / Celery ────────────────────────
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"

    # ── Document Storage ─────────────────────
    # Base for relative document paths; empty reads paths as stored (cwd-relative)
    UPLOADS_DIR: str = ""

    # ── LLM Provider (document oracle) ───────
    LLM_PROVIDER: str = "openai"
    OPENAI_API_KEY: str = ""
    LLM_MODEL: str = "gpt-4o"
    LLM_TEMPERATURE: float = 0.0
    LLM_MAX_TOKENS: int = 500
    LLM_TIMEOUT_SECONDS: float = 60.0

    # ── Google Gemini ────────────────────────
    GOOGLE_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # ── LangSmith Tracing ────────────────────
    LANGSMITH_API_KEY: str = ""
    LANGSMITH_ENDPOINT: str = "https://api.smith.langchain.com"
    LANGSMITH_PROJECT: str = "driver-onboarding"
    LANGSMITH_TRACING: bool = False

    # ── Validation Pipeline ──────────────────
    VALIDATION_RECENT_WINDOW_SECONDS: int = 60
    VALIDATION_MAX_CONCURRENCY: int = 0   # 0 = one task per pending driver
    VALIDATION_SCHEDULE_MINUTE: str = "0"  # cron minute field → hourly

    # ── Application ───────────────────────────
    APP_ENV: str = "development"

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}


settings = Settings()
