from factguard_core import config

from .base import DocumentStore
from .fs import FsDocumentStore
from .redis_store import RedisDocumentStore

__all__ = ["DocumentStore", "FsDocumentStore", "RedisDocumentStore", "get_store"]


def get_store() -> DocumentStore:
    if config.STORAGE_BACKEND == "redis":
        from .client import get_redis
        return RedisDocumentStore(get_redis())
    return FsDocumentStore(config.DOCSTORE_ROOT)
