from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Record store; leave unset to run with an unconfigured store (empty data)
    DATABASE_URL: str | None = None

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    # Calendar-day bucketing and report timestamps use this zone
    SHOP_TIMEZONE: str = "Asia/Jakarta"

    # Dashboard
    LOW_STOCK_THRESHOLD: int = 5
    DAILY_SERIES_DAYS: int = 30

    # Reports
    REPORT_TITLE: str = "LAPORAN PENGADAAN & PENJUALAN SOUVENIR"
    REPORT_SUBTITLE: str = "SEKSI EKONOMI"

    # Public storefront
    WHATSAPP_NUMBER: str = "6281144403111"

    # Asset storage (item images, promo banners, generated reports)
    FILE_STORAGE_PATH: str = "/tmp/kikstshop-files"
    ASSET_BASE_URL: str = "/files"

    # Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"

    @property
    def shop_tz(self) -> ZoneInfo:
        return ZoneInfo(self.SHOP_TIMEZONE)


settings = Settings()
