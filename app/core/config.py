from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    PROJECT_NAME: str = "SphereNet Waitlist API"

    # Database - local SQLite by default, override with environment variable for production
    DATABASE_URL: str = "sqlite:///./waitlist.db"

    # Rate limiting (admitted signups per hashed IP inside the trailing window)
    RATE_LIMIT_MAX_SUBMISSIONS: int = 3
    RATE_LIMIT_WINDOW_MINUTES: int = 60

    # App Settings
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    class Config:
        # Use absolute path to .env file
        env_file = Path(__file__).parent.parent.parent / ".env"
        env_file_encoding = 'utf-8'
        extra = "ignore"


settings = Settings()
