"""Application configuration."""

from datetime import time
from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "Weekly Workload API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    database_url: str = getenv("DATABASE_URL", "sqlite:///./workload.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "60"))
    admin_user: str = getenv("ADMIN_USER", "")
    admin_pass: str = getenv("ADMIN_PASS", "")
    business_timezone: str = getenv("BUSINESS_TIMEZONE", "America/Los_Angeles")
    week_start_weekday: int = int(getenv("WEEK_START_WEEKDAY", "0"))
    week_start_time: time = time.fromisoformat(getenv("WEEK_START_TIME", "09:00"))
    default_weekly_capacity: int = int(getenv("DEFAULT_WEEKLY_CAPACITY", "50"))
    almost_full_threshold: int = int(getenv("ALMOST_FULL_THRESHOLD", "3"))


settings: Settings = Settings()
