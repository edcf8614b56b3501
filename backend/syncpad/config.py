"""
Application Configuration
Централизованное управление настройками приложения
"""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # MongoDB
    mongo_url: str = "mongodb://localhost:27017"
    db_name: str = "syncpad"

    # JWT
    jwt_secret: str = "syncpad-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expiration_days: int = 1
    reset_token_minutes: int = 15  # Время жизни токена сброса пароля

    # Encryption
    encryption_key: str = "default-encryption-key-change-in-production"

    # Sharing
    share_token_max_attempts: int = 10

    # Admin
    storage_recalc_hours: int = 24
    admin_max_login_attempts: int = 5
    admin_lock_minutes: int = 120

    # Server
    host: str = "0.0.0.0"
    port: int = 3330
    debug: bool = False
    allowed_origins: str = "*"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
