from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - HOST / PORT: address the server binds to (default 0.0.0.0:5000)
    - APP_ENV: 'development' (default) or 'production'; production serves STATIC_DIR
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - DATABASE_URL: 'sqlite:///path/to.db' selects the sqlite backend at that path
    - SQLITE_DB_PATH: path to sqlite db file when DATABASE_URL is unset. Default './data/taskboard.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - STATIC_DIR: directory holding the built UI. Default './dist'
    - LOG_LEVEL: root log level name. Default 'INFO'
    """

    host: str
    port: int
    app_env: str
    persistence_backend: str
    sqlite_db_path: str
    cors_allow_origins: List[str]
    static_dir: str
    log_level: str

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


_SQLITE_URL_PREFIX = "sqlite:///"


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    sqlite_path = _get_env("SQLITE_DB_PATH", "./data/taskboard.db").strip()

    database_url = _get_env("DATABASE_URL", "").strip()
    if database_url.startswith(_SQLITE_URL_PREFIX):
        backend = "sqlite"
        sqlite_path = database_url[len(_SQLITE_URL_PREFIX):]

    if backend not in {"memory", "sqlite"}:
        # Fallback to memory if unsupported
        backend = "memory"

    app_env = _get_env("APP_ENV", "development").strip().lower()

    return Settings(
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "5000"), 5000),
        app_env=app_env,
        persistence_backend=backend,
        sqlite_db_path=sqlite_path,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        static_dir=_get_env("STATIC_DIR", "./dist").strip(),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
