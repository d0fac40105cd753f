# fantasy_nexus/core/db.py
import logging
import os
from typing import Any
from urllib.parse import urlparse, urlunparse, parse_qsl, urlencode

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy import text

logger = logging.getLogger("app.db")

_engine: AsyncEngine | None = None

def _ensure_asyncpg(url: str) -> str:
    """
    Normalize any postgres URL to asyncpg + ssl=require.
    Works for:
      - postgres://...
      - postgresql://...
      - postgresql+psycopg2://...
    A libpq-style sslmode=... is translated to asyncpg's ssl=...
    """
    if not url:
        return url

    # normalize scheme
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql+psycopg2://"):
        url = "postgresql://" + url[len("postgresql+psycopg2://"):]
    if not url.startswith("postgresql+asyncpg://"):
        url = "postgresql+asyncpg://" + url.split("postgresql://", 1)[-1]

    parsed = urlparse(url)
    q = dict(parse_qsl(parsed.query))
    sslmode = q.pop("sslmode", None)
    if "ssl" not in q:
        q["ssl"] = sslmode or "require"
    final_url = urlunparse(parsed._replace(query=urlencode(q)))

    # no secrets in the log line
    logger.info("DB using asyncpg URL -> host=%s port=%s ssl=%s", parsed.hostname or "?", parsed.port or "?", q["ssl"])
    return final_url

def get_database_url() -> str | None:
    raw = os.getenv("DATABASE_URL")
    if not raw:
        logger.warning("DATABASE_URL not set; DB layer disabled.")
        return None
    return _ensure_asyncpg(raw)

async def init_engine() -> AsyncEngine | None:
    global _engine
    url = get_database_url()
    if not url:
        return None
    _engine = create_async_engine(url, pool_pre_ping=True)
    return _engine

async def close_engine():
    global _engine
    if _engine:
        await _engine.dispose()
        _engine = None

def db_enabled() -> bool:
    return _engine is not None

async def exec_sql(sql: str, params: dict[str, Any] | None = None):
    if not _engine:
        return None
    async with _engine.begin() as conn:
        return await conn.execute(text(sql), params or {})

async def fetch_one(sql: str, params: dict[str, Any] | None = None) -> dict[str, Any] | None:
    if not _engine:
        return None
    async with _engine.connect() as conn:
        row = (await conn.execute(text(sql), params or {})).mappings().first()
        return dict(row) if row else None
