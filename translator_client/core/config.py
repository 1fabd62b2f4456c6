from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOGGER_NAME = "pdf-translator"


class Settings(BaseSettings):
    """إعدادات العميل الثابتة، تُقرأ مرة واحدة عند بدء التشغيل من البيئة أو ملف .env."""

    model_config = SettingsConfigDict(
        env_prefix="TRANSLATOR_",
        env_file=Path(__file__).resolve().parents[2] / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app_name: str = "PDF Translator"
    app_version: str = "0.1.0"

    api_endpoint: str = Field(..., description="عنوان واجهة المهام الخلفية.")
    user_pool_id: str = ""
    user_pool_client_id: str = ""
    region: str = "us-east-1"

    poll_interval_seconds: float = Field(10.0, gt=0)
    refresh_delay_seconds: float = Field(2.0, ge=0)
    request_timeout_seconds: float = Field(30.0, gt=0)

    source_language: str = "auto"
    default_target_language: str = "es"
    log_level: str = "INFO"

    @property
    def api_base(self) -> str:
        return self.api_endpoint.rstrip("/")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
