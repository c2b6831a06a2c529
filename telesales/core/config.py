from functools import cached_property
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://telesales:telesales@db:5432/telesales"
    APP_ENV: str = "development"
    SECRET_KEY: str = "changeme-secret-key"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://crm.example.com,https://api.example.com"
    CORS_ORIGINS: str = "*"

    # IANA zone that defines the calendar day for login streaks and the
    # midnight deadline of the streak reminder.
    STREAK_TIMEZONE: str = "UTC"

    # Default celebration-sound preference handed to the milestone notifier.
    SOUND_ENABLED: bool = True

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @cached_property
    def streak_tz(self) -> ZoneInfo:
        return ZoneInfo(self.STREAK_TIMEZONE)


settings = Settings()
