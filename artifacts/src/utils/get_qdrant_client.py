from functools import lru_cache
from qdrant_client import QdrantClient
from artifacts.src.config import get_config


@lru_cache(maxsize=1)
def get_qdrant_client() -> QdrantClient:
    """
    Get Qdrant client (cached singleton).

    The client owns a connection pool and is safe to share between
    request threads, so one instance serves the whole process.

    QDRANT_URL may be a server URL or ":memory:" for an in-process
    store (local development and tests). Note that every new ":memory:"
    client starts empty.
    """
    config = get_config()
    return QdrantClient(location=config.qdrant_url, api_key=config.qdrant_api_key)
