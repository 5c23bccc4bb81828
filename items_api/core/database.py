# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Database connectivity — builds the pooled engine or the hosted REST client.
"""

import httpx
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine

from items_api.core.config import Settings


def build_sql_url(settings: Settings) -> URL:
    return URL.create(
        settings.DB_DRIVER,
        username=settings.DB_USER,
        password=settings.DB_PASSWORD or None,
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        database=settings.DB_NAME,
    )


def build_engine(settings: Settings) -> Engine:
    return create_engine(
        build_sql_url(settings),
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )


def build_hosted_client(settings: Settings) -> httpx.Client:
    """HTTP client for a PostgREST endpoint (e.g. a Supabase project URL)."""
    if not settings.DATABASE_URL:
        raise ValueError("DATABASE_URL must be set when DB_BACKEND=hosted")
    headers = {"Accept-Profile": settings.DATABASE_SCHEMA,
               "Content-Profile": settings.DATABASE_SCHEMA}
    if settings.DATABASE_API_KEY:
        headers["apikey"] = settings.DATABASE_API_KEY
        headers["Authorization"] = f"Bearer {settings.DATABASE_API_KEY}"
    return httpx.Client(
        base_url=f"{settings.DATABASE_URL.rstrip('/')}/rest/v1",
        headers=headers,
        timeout=settings.DATABASE_TIMEOUT,
    )
