# backend/facility_booking/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repository root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/sqlite/facility_booking.db"
    redis_url: str = "redis://localhost:6379/0"
    # Seconds; bounds how long a publish can hold up a submit or cancel
    redis_socket_timeout: float = 0.5
    log_level: str = "INFO"

    daily_cap_minutes: int = 180
    default_slot_minutes: int = 60
    default_capacity: int = 10

    events_channel_prefix: str = "events:booking"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative sqlite paths are anchored at the repository root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
