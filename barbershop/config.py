# barbershop/config.py

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./barbershop.db"

    secret_key: str = "change-me-later"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    slot_minutes: int = 30
    timezone: str = "America/Sao_Paulo"

    # account created with this email becomes the shop admin
    bootstrap_admin_email: Optional[str] = None

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="BARBERSHOP_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
