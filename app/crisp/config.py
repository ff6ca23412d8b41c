from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OPENAI_API_KEY: Optional[str] = None

    CRISP_MODEL: str = "gpt-4o-mini"
    CRISP_STATE_PATH: str = ".crisp/interview-storage.json"
    CRISP_LOG_LEVEL: str = "INFO"
    CRISP_QUESTION_WORKERS: int = 6
    CRISP_JOB_ROLE: str = "frontend developer"


@lru_cache
def get_settings() -> Settings:
    return Settings()
