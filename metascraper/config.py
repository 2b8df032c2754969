"""Runtime settings for the scraper.

Values come from environment variables; a `.env` file in the current
directory is loaded first and never overrides variables that are already set.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import InvalidConfig

DEFAULT_RETRY_COUNT = 3
DEFAULT_TIMEOUT = "10s"
DEFAULT_PARALLEL_REQ_COUNT = 10
DEFAULT_CSV_FILENAME = "result.csv"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    retry_count: int = DEFAULT_RETRY_COUNT
    timeout: str = DEFAULT_TIMEOUT
    parallel_req_count: int = DEFAULT_PARALLEL_REQ_COUNT
    csv_filename: str = DEFAULT_CSV_FILENAME
    log_level: str = DEFAULT_LOG_LEVEL


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfig(f"{name} must be an integer, got {raw!r}") from None


def load_settings(env: Optional[Mapping[str, str]] = None, dotenv_path: Optional[str] = None) -> Settings:
    """Build Settings from env (os.environ by default, after loading .env)."""
    if env is None:
        load_dotenv(dotenv_path, override=False)
        env = os.environ

    return Settings(
        retry_count=_env_int(env, "RETRY_COUNT", DEFAULT_RETRY_COUNT),
        timeout=env.get("TIMEOUT") or DEFAULT_TIMEOUT,
        parallel_req_count=_env_int(env, "PARALLEL_REQ_COUNT", DEFAULT_PARALLEL_REQ_COUNT),
        csv_filename=env.get("CSV_FILENAME") or DEFAULT_CSV_FILENAME,
        log_level=(env.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )
