from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Course Quiz Platform"
    APP_VERSION: str = "1.0.0"

    # Database
    DATABASE_URL: str = "sqlite:///./coursequiz.db"

    # Security
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 90
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Quiz catalog shipped with the package unless overridden
    QUIZ_CATALOG_PATH: Path = PACKAGE_DIR / "data" / "quiz_catalog.json"

    LOG_LEVEL: str = "INFO"

    # uvicorn
    HOST: str = "127.0.0.1"
    PORT: int = 8000


settings = Settings()
