"""
Environment-backed settings helpers.

Values are read once at startup and turned into frozen settings objects.
Nothing here is mutated after the app is built.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def app_env() -> str:
    return env_str("APP_ENV", "development").lower()


def is_production() -> bool:
    return app_env() == "production"


@dataclass(frozen=True)
class AppSettings:
    version: str
    cors_origins: tuple[str, ...]
    seed_on_startup: bool
    log_level: str

    @classmethod
    def from_env(cls) -> AppSettings:
        return cls(
            version=env_str("APP_VERSION", "2.0"),
            cors_origins=env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
            seed_on_startup=env_bool("SEED"),
            log_level=env_str("LOG_LEVEL", "INFO").upper(),
        )
