# payoff/config.py
import os
from dataclasses import dataclass
from typing import List
from dotenv import load_dotenv

from .optimization import MAX_MONTHS

load_dotenv()

DEFAULT_STORAGE_KEY = "clearpath_debt_inputs_v1"


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    storage_path: str
    storage_key: str
    max_months: int
    parallel: bool
    cors_origins: List[str]
    log_level: str


def get_settings() -> Settings:
    """Read settings from the environment (and .env) on every call."""
    max_months = _env_int("PAYOFF_MAX_MONTHS", MAX_MONTHS)
    origins = os.getenv("PAYOFF_CORS_ORIGINS", "*")
    return Settings(
        storage_path=os.getenv("PAYOFF_STORAGE_PATH", os.path.join("data", "payoff_inputs.json")),
        storage_key=os.getenv("PAYOFF_STORAGE_KEY", DEFAULT_STORAGE_KEY),
        max_months=max_months if max_months > 0 else MAX_MONTHS,
        parallel=_env_bool("PAYOFF_PARALLEL", True),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
        log_level=os.getenv("PAYOFF_LOG_LEVEL", "INFO").upper(),
    )
