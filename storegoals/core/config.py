from datetime import date, datetime
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://storegoals:storegoals@db:5432/storegoals"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # IANA zone of the stores; "today" at the HTTP edge is computed here.
    STORE_TIMEZONE: str = "America/Sao_Paulo"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://painel.minhaloja.com,https://admin.minhaloja.com"
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    def store_today(self) -> date:
        return datetime.now(tz=ZoneInfo(self.STORE_TIMEZONE)).date()


settings = Settings()
