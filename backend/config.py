# backend/config.py

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigError

DEFAULT_TABLE = "deals"
DEFAULT_TIMEOUT = 10.0
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    supabase_url: str
    supabase_key: str
    table: str = DEFAULT_TABLE
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    log_level: str = "INFO"


def _env(*names: str) -> str:
    """Return the first non-empty variable among names, or ''."""
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return ""


def load_settings(dotenv: bool = True) -> Settings:
    """Read store settings from the environment (and a .env file if present).

    Raises ConfigError when the endpoint URL or the public key is missing.
    """
    if dotenv:
        load_dotenv()

    url = _env("SUPABASE_URL", "VITE_SUPABASE_URL")
    key = _env("SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY")

    missing = []
    if not url:
        missing.append("SUPABASE_URL")
    if not key:
        missing.append("SUPABASE_ANON_KEY")
    if missing:
        raise ConfigError(
            "Missing environment variables",
            details=", ".join(missing),
            url=url or None,
        )

    timeout_raw = _env("STORE_TIMEOUT")
    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
    except ValueError:
        raise ConfigError("STORE_TIMEOUT must be a number", details=timeout_raw)
    if timeout <= 0:
        raise ConfigError("STORE_TIMEOUT must be positive", details=timeout_raw)

    return Settings(
        supabase_url=url.rstrip("/"),
        supabase_key=key,
        table=_env("DEALS_TABLE") or DEFAULT_TABLE,
        timeout=timeout,
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
