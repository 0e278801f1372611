# config.py
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    gemini_api_key: Optional[str]
    gemini_model: str
    llm_temperature: float
    mongodb_uri: str
    mongodb_db: str
    admin_email: Optional[str]
    admin_password: Optional[str]
    app_env: str
    log_level: str

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY"),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
        llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0.3")),
        mongodb_uri=os.getenv("MONGODB_URI", "mongodb://localhost:27017/careerpilot"),
        mongodb_db=os.getenv("MONGODB_DB", "careerpilot"),
        admin_email=os.getenv("ADMIN_EMAIL"),
        admin_password=os.getenv("ADMIN_PASSWORD"),
        app_env=os.getenv("APP_ENV", "development"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def is_strict_matching() -> bool:
    """
    Strict mode forces the server-side scorer for skill matching.
    Read on every call so it can be toggled without a restart.
    """
    return os.getenv("STRICT_MATCHING", "false").strip().lower() in TRUTHY
