from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"
    DB_NAME: str = "boardforms"
    STORAGE_BACKEND: Literal["mongo", "memory"] = "mongo"
    SEED_DEMO_DATA: bool = False
    CLIENT_URL: str = "http://localhost:3000"
    # Re-run visibility and validation on intake instead of trusting the client
    ENFORCE_SUBMISSION_RULES: bool = True
    MONDAY_API_URL: str = "https://api.monday.com/v2"
    MONDAY_API_VERSION: str = "2024-01"
    MONDAY_API_TOKEN: str = ""
    MONDAY_TIMEOUT: float = 30.0
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
