import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel


_ENV_PATH = os.path.join(os.path.dirname(__file__), "..", ".env")
load_dotenv(dotenv_path=_ENV_PATH, override=False)


def _get_env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _get_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


class Settings(BaseModel):
    VERIFY_TOKEN: str
    ACCESS_TOKEN: str
    PHONE_ID: str
    GRAPH_API_URL: str
    STORAGE_BACKEND: str  # json | sql
    DATA_FILE: str
    DATABASE_URL: str
    REPLY_ON_INVALID_AMOUNT: bool
    LOG_LEVEL: str
    APP_ENV: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        VERIFY_TOKEN=_get_env("VERIFY_TOKEN", ""),
        ACCESS_TOKEN=_get_env("ACCESS_TOKEN", ""),
        PHONE_ID=_get_env("PHONE_ID", ""),
        GRAPH_API_URL=_get_env("GRAPH_API_URL", "https://graph.facebook.com/v21.0"),
        STORAGE_BACKEND=_get_env("STORAGE_BACKEND", "json").strip().lower(),
        DATA_FILE=_get_env("DATA_FILE", "piggybank.jsonl"),
        DATABASE_URL=_get_env("DATABASE_URL", "sqlite:///piggybank.db"),
        REPLY_ON_INVALID_AMOUNT=_get_bool("REPLY_ON_INVALID_AMOUNT", False),
        LOG_LEVEL=_get_env("LOG_LEVEL", "INFO").upper(),
        APP_ENV=_get_env("APP_ENV", "development"),
    )
