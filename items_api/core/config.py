# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration — all env-driven.
Single source of truth for every tunable parameter.
"""

import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "items-api")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))

    # sql | hosted | memory
    DB_BACKEND: str = os.getenv("DB_BACKEND", "sql").lower()
    ITEMS_TABLE: str = os.getenv("ITEMS_TABLE", "items")

    # ── SQL variant ──
    DB_DRIVER: str = os.getenv("DB_DRIVER", "postgresql+psycopg2")
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
    DB_NAME: str = os.getenv("DB_NAME", "postgres")
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))

    # ── Hosted variant ──
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    DATABASE_API_KEY: str = os.getenv("DATABASE_API_KEY", "")
    DATABASE_SCHEMA: str = os.getenv("DATABASE_SCHEMA", "public")
    DATABASE_TIMEOUT: float = float(os.getenv("DATABASE_TIMEOUT", "10.0"))

    # ── Connection monitor ──
    MONITOR_ENABLED: bool = os.getenv("MONITOR_ENABLED", "true").lower() == "true"
    MONITOR_INTERVAL_SECONDS: float = float(os.getenv("MONITOR_INTERVAL_SECONDS", "100"))
    MONITOR_MAX_ATTEMPTS: int = int(os.getenv("MONITOR_MAX_ATTEMPTS", "5"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
