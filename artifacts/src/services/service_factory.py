from functools import lru_cache

from artifacts.src.config import get_config
from artifacts.src.services.artifact_service import ArtifactService
from artifacts.src.services.artifact_store import QdrantArtifactStore
from artifacts.src.utils.get_qdrant_client import get_qdrant_client


def get_artifact_store() -> QdrantArtifactStore:
    store = QdrantArtifactStore(
        qdrant_client=get_qdrant_client(),
        collection_name=get_config().qdrant_collection_name,
    )
    store.ensure_collection()
    return store


@lru_cache(maxsize=1)
def get_artifact_service() -> ArtifactService:
    """Artifact service shared by all requests (built on first use)."""
    return ArtifactService(store=get_artifact_store())


def reset_services() -> None:
    """
    Drop the cached artifact service, Qdrant client and config, closing the
    client if one was built. The next request rebuilds them from the
    environment (with ":memory:" that means an empty store).
    """
    if get_qdrant_client.cache_info().currsize:
        get_qdrant_client().close()
    for factory in (get_artifact_service, get_qdrant_client, get_config):
        factory.cache_clear()
