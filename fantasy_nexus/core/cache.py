# fantasy_nexus/core/cache.py
import json
import logging
import os
from typing import Any, List, Optional

import redis.asyncio as redis

logger = logging.getLogger("app.cache")

_client: redis.Redis | None = None

def get_redis_url() -> str:
    return os.getenv("REDIS_URL", "redis://localhost:6379/0")

def get_client() -> redis.Redis:
    # created lazily so importing the app never opens a socket
    global _client
    if _client is None:
        _client = redis.from_url(get_redis_url(), decode_responses=True)
    return _client

async def close_cache():
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None

def decode(raw: Any) -> Any:
    """Strings are JSON-decoded when possible; anything else passes through."""
    if isinstance(raw, (str, bytes)):
        try:
            return json.loads(raw)
        except ValueError:
            return raw
    return raw

async def get_json(key: str) -> Optional[Any]:
    """GET + decode. Cache failures read as a miss."""
    try:
        raw = await get_client().get(key)
    except Exception as e:
        logger.warning("cache GET failed key=%s: %r", key, e)
        return None
    if raw is None:
        return None
    return decode(raw)

async def lrange_json(key: str) -> List[Any]:
    """
    Full LRANGE of a list of JSON entries. Entries that fail to decode
    are skipped; a failed call reads as an empty list.
    """
    try:
        entries = await get_client().lrange(key, 0, -1)
    except Exception as e:
        logger.warning("cache LRANGE failed key=%s: %r", key, e)
        return []
    out: List[Any] = []
    for entry in entries or []:
        if isinstance(entry, (str, bytes)):
            try:
                out.append(json.loads(entry))
            except ValueError:
                logger.debug("cache skip malformed entry key=%s", key)
                continue
        elif entry is not None:
            out.append(entry)
    return out
