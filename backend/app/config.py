from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/sleep.db"
    
    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    ADVISOR_MAX_TOKENS: int = 700
    ADVISOR_TEMPERATURE: float = 0.7
    
    # Seed 30 days of dummy records on startup when the table is empty
    SEED_DUMMY_DATA: bool = False
    
    # App Settings
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    APP_NAME: str = "SleepLog"
    API_V1_PREFIX: str = "/api"
    CORS_ORIGINS: List[str] = ["*"]
    
    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
