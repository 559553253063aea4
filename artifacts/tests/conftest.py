"""
Pytest configuration for artifacts tests.

Store and service tests run against an in-process Qdrant (":memory:"),
so they exercise the real filters and payload writes without a server.
"""

import pytest
from qdrant_client import QdrantClient

from artifacts.src.services.artifact_service import ArtifactService
from artifacts.src.services.artifact_store import QdrantArtifactStore
from artifacts.src.services.requests import CreateArtifactRequest
from artifacts.src.services.service_factory import reset_services
from artifacts.tests.factories import make_artifact_data


@pytest.fixture(autouse=True)
def fresh_services():
    """Start and end every test without cached config, client or service."""
    reset_services()
    yield
    reset_services()


@pytest.fixture
def store():
    qdrant_client = QdrantClient(":memory:")
    artifact_store = QdrantArtifactStore(
        qdrant_client=qdrant_client, collection_name="artifacts_test"
    )
    artifact_store.ensure_collection()
    yield artifact_store
    qdrant_client.close()


@pytest.fixture
def service(store):
    return ArtifactService(store=store)


@pytest.fixture
def artifact_data():
    return make_artifact_data()


@pytest.fixture
def create_artifact(service):
    """Create an artifact through the service and return its id."""

    def _create(**overrides) -> str:
        result = service.create(CreateArtifactRequest(data=make_artifact_data(**overrides)))
        return result.inserted_id

    return _create
