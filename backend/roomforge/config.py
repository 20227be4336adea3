"""
RoomForge - Application Configuration
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "RoomForge"
    debug: bool = False

    # Database
    # SQLite for development, PostgreSQL (postgresql+asyncpg://...) for production
    database_url: str = "sqlite+aiosqlite:///./roomforge.db"

    # Authentication
    jwt_secret_key: str = "roomforge-secret-key-change-in-production"
    jwt_expire_minutes: int = 480  # 8 hours
    bcrypt_rounds: int = 12

    # Default admin created on first start
    default_admin_username: str = "admin"
    default_admin_password: str = "admin123"

    # Map access codes
    access_code_length: int = 6
    access_code_max_attempts: int = 10

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
