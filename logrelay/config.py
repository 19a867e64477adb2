"""
logrelay — Configuration
Minimal log-ingestion relay: direct API + Ably webhook → SQL table → Telegram.
Engine selection mirrors the multi-database pattern (SQLite / MySQL / MSSQL).
"""
from __future__ import annotations

import os
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ──────────────────────────────────────────────────────────────────
    app_name: str = "logrelay"
    app_version: str = "2.0.0"
    app_env: str = "development"
    log_level: str = "INFO"
    expose_internal_error_details: bool = False

    # ── Database ─────────────────────────────────────────────────────────────
    # Note: SQLite is for development only. Production should use mysql/mssql.
    db_type: Literal["sqlite", "sqlite_memory", "mysql", "mssql"] = "sqlite"
    db_name: str = "logrelay"         # SQLite: file name (logrelay.db); MySQL/MSSQL: schema/db name
    db_host: str = "localhost"
    db_port: int = 3306               # MySQL default; MSSQL use 1433
    db_user: str = "root"
    db_password: str = ""

    # MySQL / MSSQL connection pool (ignored for SQLite)
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600

    # ── Ingest auth ──────────────────────────────────────────────────────────
    # Env names shared with the deployed worker.
    da_writetoken: str = ""           # Bearer token for POST /api
    ably_webhook_secret: str = ""     # X-Ably-Auth value for POST /ably

    # ── Telegram ─────────────────────────────────────────────────────────────
    log_telegram_bot_token: str = ""
    log_telegram_chat_id: str = ""
    telegram_api_base: str = "https://api.telegram.org"
    telegram_timeout_s: float = 8.0
    notify_min_level: int = 3         # events at or above this level are forwarded

    # ── Constructed Database URL ──────────────────────────────────────────────
    @property
    def database_url(self) -> str:
        override = os.getenv("DATABASE_URL")
        if override:
            return override

        if self.db_type == "sqlite":
            return f"sqlite:///./{self.db_name}.db"

        if self.db_type == "sqlite_memory":
            return "sqlite:///:memory:"

        if self.db_type == "mysql":
            return (
                f"mysql+pymysql://{self.db_user}:{self.db_password}"
                f"@{self.db_host}:{self.db_port}/{self.db_name}"
            )

        if self.db_type == "mssql":
            return (
                f"mssql+pyodbc://{self.db_user}:{self.db_password}"
                f"@{self.db_host}/{self.db_name}"
                f"?driver=ODBC+Driver+17+for+SQL+Server"
            )

        return f"sqlite:///./{self.db_name}.db"

    @property
    def is_dev_env(self) -> bool:
        return self.app_env.strip().lower() in {"dev", "development", "local", "test", "testing"}

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
