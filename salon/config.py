# salon/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    database_url: str = "sqlite:///./salon.db"
    redis_url: str = "redis://localhost:6379/0"

    # Business calendar
    business_open_hour: int = 9
    business_close_hour: int = 18
    slot_granularity_minutes: int = 30
    closed_weekdays: list[int] = [6]  # 0 = Monday, 6 = Sunday
    allow_overrun_past_close: bool = True

    booking_horizon_days: int = 60
    draft_ttl_seconds: int = 3600

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative sqlite path -> absolute, anchored at the project root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
