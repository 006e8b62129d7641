from __future__ import annotations
import hashlib
from typing import Optional

import redis

from factguard_core import config
from factguard_core.errors import StorageError


def sha1(s: str) -> str:
    return hashlib.sha1(s.encode("utf-8")).hexdigest()


def key_document(document_id: str) -> str:
    return f"doc:{document_id}"


def get_redis(url: Optional[str] = None) -> "redis.Redis":
    """Connected Redis client for the document store; StorageError on a bad URL or failed ping."""
    url = (url or config.REDIS_URL or "").strip()
    if not (url.startswith("redis://") or url.startswith("rediss://") or url.startswith("unix://")):
        raise StorageError(f"Invalid REDIS_URL: {url!r}")

    r = redis.Redis.from_url(
        url,
        decode_responses=True,
        socket_connect_timeout=2.0,
        socket_timeout=5.0,
    )
    try:
        r.ping()
    except redis.RedisError as e:
        raise StorageError(f"Redis unavailable at {url}: {e}") from e
    return r
