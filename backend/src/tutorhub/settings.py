from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path


def _load_local_env_file() -> None:
    """Load variables from .env when present, without overriding exported ones."""
    env_path = Path('.env')
    if not env_path.exists():
        return

    for raw_line in env_path.read_text(encoding='utf-8').splitlines():
        line = raw_line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, value = line.split('=', 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        os.environ.setdefault(key, value)


_load_local_env_file()


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    debug: bool
    db_backend: str
    database_url: str | None
    cache_backend: str
    redis_url: str
    slot_cache_ttl_seconds: int
    default_timezone: str
    max_slots_per_day: int


def load_settings() -> Settings:
    return Settings(
        app_name=os.getenv("APP_NAME", "tutorhub"),
        app_version=os.getenv("APP_VERSION", "0.1.0"),
        debug=os.getenv("APP_DEBUG", "false").lower() in {"1", "true", "yes"},
        db_backend=os.getenv("DB_BACKEND", "memory"),
        database_url=os.getenv("DATABASE_URL"),
        cache_backend=os.getenv("CACHE_BACKEND", "memory"),
        redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        slot_cache_ttl_seconds=int(os.getenv("SLOT_CACHE_TTL_SECONDS", "86400")),
        default_timezone=os.getenv("DEFAULT_TIMEZONE", "Asia/Kolkata"),
        max_slots_per_day=int(os.getenv("MAX_SLOTS_PER_DAY", "288")),
    )
