from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite+aiosqlite:///./careslots.db"
    sql_echo: bool = False

    # App Settings
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    # Scheduling
    min_slot_duration: int = 15
    max_slot_duration: int = 120
    available_dates_window_days: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
