import os
from pydantic_settings import BaseSettings
from typing import List
import secrets

class Settings(BaseSettings):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Taskboard API")
    API_PREFIX: str = os.getenv("API_PREFIX", "/api")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Token lifetimes
    ACCESS_TOKEN_EXPIRE_MINUTES: int = os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 15)
    REFRESH_TOKEN_EXPIRE_DAYS: int = os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", 7)
    ALGORITHM: str = "HS256"

    # Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./taskboard.db")
    SEED_DISABLE: bool = False

    # Pagination defaults
    DEFAULT_PAGE: int = 1
    DEFAULT_PAGE_LIMIT: int = 10

    # CORS settings
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:5173",  # Web client
        "http://localhost:5175",
    ]

    # JWT settings, one secret per token kind
    JWT_ACCESS_SECRET: str = os.getenv("JWT_ACCESS_SECRET", secrets.token_urlsafe(32))
    JWT_REFRESH_SECRET: str = os.getenv("JWT_REFRESH_SECRET", secrets.token_urlsafe(32))

    @property
    def seeding_enabled(self) -> bool:
        """Seeding is off for test runs and when explicitly disabled."""
        return not self.SEED_DISABLE and self.ENVIRONMENT != "test"

    class Config:
        case_sensitive = True
        env_file = ".env"

settings = Settings()
