from __future__ import annotations

from dataclasses import replace

from taskboard.settings import Settings

BASE_SETTINGS = Settings(
    host="127.0.0.1",
    port=5000,
    app_env="development",
    persistence_backend="memory",
    sqlite_db_path="./data/taskboard.db",
    cors_allow_origins=["*"],
    static_dir="./dist",
    log_level="INFO",
)


def make_settings(**overrides) -> Settings:
    return replace(BASE_SETTINGS, **overrides)
