from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Expensed Receipt Engine"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "https://expensed.app",
        "https://www.expensed.app",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
