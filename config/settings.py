"""
Centralized configuration using pydantic-settings.

How it works:
- Reads environment variables automatically (e.g., DAY_START_HOUR env var → Settings.DAY_START_HOUR)
- Falls back to defaults defined here if env vars are not set
- Can also read from a .env file in the project root

Every module imports `settings` from here instead of hardcoding values.
The scheduling core reads its grid band, duration defaults and resize
scale from here too, so the same constants drive the API and the tests.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── PostgreSQL (job store) ──────────────────────────────────
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "fieldservice"
    POSTGRES_PASSWORD: str = "fieldservice"
    POSTGRES_DB: str = "fieldservice"

    # ── Redis (per-job commit locks) ────────────────────────────
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    COMMIT_LOCK_TTL_SECONDS: int = 30

    # ── Grid ────────────────────────────────────────────────────
    DAY_START_HOUR: int = 6            # first visible hour row (06:00)
    DAY_END_HOUR: int = 20             # band ends at 20:00, last row is 19:00
    SLOT_MINUTES: int = 15             # snap step for drops and resizes
    WEEK_STARTS_ON: int = 6            # Python weekday: 0 = Monday, 6 = Sunday
    DISPLAY_TIMEZONE: str = "UTC"      # local display zone for date/hour bucketing
    MONTH_CELL_JOB_LIMIT: int = 3      # chips shown per month cell before "+N more"

    # ── Durations ───────────────────────────────────────────────
    DEFAULT_DURATION_MINUTES: int = 60  # used when neither end nor estimate exist
    MIN_DURATION_MINUTES: int = 15      # floor for every effective window
    DEFAULT_DROP_HOUR: int = 9          # start hour for a day-level drop of an unscheduled job
    RESIZE_PIXELS_PER_HOUR: float = 50.0
    WORKDAY_HOURS: float = 8.0          # technician capacity used by the load summary

    # ── Commits ─────────────────────────────────────────────────
    SUPERSEDE_INFLIGHT_COMMITS: bool = False
    JOB_STORE_URL: str = "http://localhost:8000"
    UPDATE_TIMEOUT_SECONDS: float = 10.0

    # ── App ─────────────────────────────────────────────────────
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    @property
    def database_url(self) -> str:
        """Async connection string for FastAPI (uses asyncpg driver)."""
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def redis_url(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton, import this everywhere
settings = Settings()
