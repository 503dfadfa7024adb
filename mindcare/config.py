# mindcare configuration
# loads env vars for the local store, report log cap, cors, logging

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# load .env from project root
load_dotenv(Path(__file__).parent.parent / ".env")


class Settings(BaseSettings):
    # key-value store ("memory" or "file")
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "memory")
    STORE_PATH: str = os.getenv("STORE_PATH", "data/local_storage.json")

    # therapist progress reports kept before the oldest are evicted
    REPORT_LOG_CAP: int = 100

    # cors
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
