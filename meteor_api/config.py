from __future__ import annotations
import os
from typing import Optional

from dotenv import load_dotenv

DEFAULT_GEONAMES_BASE_URL = "http://api.geonames.org"
DEFAULT_GEONAMES_TIMEOUT_S = 10.0
DEFAULT_RING_STEPS = 128
MIN_RING_STEPS = 8
MAX_RING_STEPS = 512
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def _env(name: str) -> Optional[str]:
    # real environment variables take precedence over .env
    load_dotenv()
    value = os.getenv(name)
    return value.strip() if value and value.strip() else None


def _env_number(name: str, default, cast):
    raw = _env(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a {cast.__name__}, got {raw!r}") from None


def geonames_username() -> Optional[str]:
    return _env("GEONAMES_USERNAME")


def geonames_base_url() -> str:
    return (_env("GEONAMES_BASE_URL") or DEFAULT_GEONAMES_BASE_URL).rstrip("/")


def geonames_timeout_s() -> float:
    return _env_number("GEONAMES_TIMEOUT_S", DEFAULT_GEONAMES_TIMEOUT_S, float)


def ring_steps() -> int:
    steps = _env_number("RING_STEPS", DEFAULT_RING_STEPS, int)
    if not MIN_RING_STEPS <= steps <= MAX_RING_STEPS:
        raise ValueError(f"RING_STEPS must be between {MIN_RING_STEPS} and {MAX_RING_STEPS}, got {steps}")
    return steps


def server_host() -> str:
    return _env("HOST") or DEFAULT_HOST


def server_port() -> int:
    return _env_number("PORT", DEFAULT_PORT, int)
