"""
Application Configuration
Loads settings from environment variables once, at process start
"""

from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from .env file"""

    # Application
    APP_ENV: str = "development"
    APP_NAME: str = "BoosterHub"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database (postgresql://... in production, sqlite:///... for local work)
    DATABASE_URL: Optional[str] = None

    # JWT
    JWT_SECRET_KEY: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_HOURS: int = 24

    # Blob storage (uploaded QR images)
    BLOB_STORAGE_URL: Optional[str] = None
    BLOB_STORAGE_KEY: Optional[str] = None
    STORAGE_BUCKET: str = "booster-assets"
    MAX_QR_UPLOAD_SIZE: int = 1048576  # 1MB

    # CORS
    CORS_ALLOW_ORIGINS: str = "*"

    # Set only when deployed behind a proxy that overwrites X-Forwarded-For
    TRUST_FORWARDED_FOR: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True
        frozen = True

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ALLOW_ORIGINS.split(",") if origin.strip()]

    @property
    def jwt_configured(self) -> bool:
        return bool(self.JWT_SECRET_KEY)

    @property
    def storage_configured(self) -> bool:
        return bool(self.BLOB_STORAGE_URL and self.BLOB_STORAGE_KEY)


@lru_cache
def get_settings() -> Settings:
    """Settings for the process entry point, read once"""
    return Settings()
