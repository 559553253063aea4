"""
Qdrant-backed document store for artifacts.

Each artifact is one point in a vectorless collection: the point id (a UUID)
is the artifact id and the point payload is the artifact document.
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Iterator
from qdrant_client import QdrantClient, models
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse

from artifacts.src.constants.artifacts import LIKE_TOKENS_FIELD, SCROLL_BATCH_SIZE
from artifacts.src.errors import StoreError
from artifacts.src.utils.payload_formatting import format_record, format_records

logger = logging.getLogger(__name__)


# Payload indexes declared on collection creation.
# The integer index on "likes" is required by Qdrant for order_by.
PAYLOAD_INDEXES = {
    "addedBy.uid": models.PayloadSchemaType.KEYWORD,
    "likedBy": models.PayloadSchemaType.KEYWORD,
    "likes": models.PayloadSchemaType.INTEGER,
}


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (UnexpectedResponse, ResponseHandlingException) as e:
        raise StoreError(f"Qdrant {operation} failed: {e}") from e


def _id_filter(artifact_id: str) -> models.Filter:
    return models.Filter(must=[models.HasIdCondition(has_id=[artifact_id])])


class QdrantArtifactStore:
    def __init__(
        self,
        qdrant_client: QdrantClient,
        collection_name: str,
    ):
        self.qdrant_client = qdrant_client
        self.collection_name = collection_name

    def ensure_collection(self) -> None:
        """Create the artifact collection and its payload indexes (if it doesn't exist)."""
        with _store_errors("create_collection"):
            if self.qdrant_client.collection_exists(collection_name=self.collection_name):
                return
            logger.info(f"Creating Qdrant collection '{self.collection_name}'")
            self.qdrant_client.create_collection(
                collection_name=self.collection_name,
                vectors_config={},
            )
            for field_name, field_schema in PAYLOAD_INDEXES.items():
                self.qdrant_client.create_payload_index(
                    collection_name=self.collection_name,
                    field_name=field_name,
                    field_schema=field_schema,
                )

    def find(self, scroll_filter: models.Filter | None = None) -> list[dict]:
        """Fetch every matching artifact, scrolling through the collection in batches."""
        documents = []
        next_page_token = None

        with _store_errors("scroll"):
            while True:
                points, next_page_token = self.qdrant_client.scroll(
                    collection_name=self.collection_name,
                    scroll_filter=scroll_filter,
                    with_payload=True,
                    with_vectors=False,
                    limit=SCROLL_BATCH_SIZE,
                    offset=next_page_token,
                )
                documents.extend(format_records(points))

                if next_page_token is None:
                    break

        return documents

    def find_by_owner(self, user_id: str) -> list[dict]:
        return self.find(
            models.Filter(
                must=[
                    models.FieldCondition(
                        key="addedBy.uid", match=models.MatchValue(value=user_id)
                    )
                ]
            )
        )

    def find_liked_by(self, user_id: str) -> list[dict]:
        # Matching a list payload succeeds if any element matches
        return self.find(
            models.Filter(
                must=[
                    models.FieldCondition(
                        key="likedBy", match=models.MatchValue(value=user_id)
                    )
                ]
            )
        )

    def find_top_liked(self, limit: int) -> list[dict]:
        with _store_errors("scroll"):
            points, _ = self.qdrant_client.scroll(
                collection_name=self.collection_name,
                with_payload=True,
                with_vectors=False,
                limit=limit,
                order_by=models.OrderBy(key="likes", direction=models.Direction.DESC),
            )
        return format_records(points)

    def get(self, artifact_id: str) -> dict | None:
        with _store_errors("retrieve"):
            records = self.qdrant_client.retrieve(
                collection_name=self.collection_name,
                ids=[artifact_id],
                with_payload=True,
                with_vectors=False,
            )
        if not records:
            return None
        return format_record(records[0])

    def get_owned(self, artifact_id: str, user_id: str) -> dict | None:
        """Get the artifact only if it is owned by user_id."""
        with _store_errors("scroll"):
            points, _ = self.qdrant_client.scroll(
                collection_name=self.collection_name,
                scroll_filter=models.Filter(
                    must=[
                        models.HasIdCondition(has_id=[artifact_id]),
                        models.FieldCondition(
                            key="addedBy.uid", match=models.MatchValue(value=user_id)
                        ),
                    ]
                ),
                with_payload=True,
                with_vectors=False,
                limit=1,
            )
        if not points:
            return None
        return format_record(points[0])

    def insert(self, artifact_id: str, document: dict[str, Any]) -> None:
        with _store_errors("upsert"):
            self.qdrant_client.upsert(
                collection_name=self.collection_name,
                points=[models.PointStruct(id=artifact_id, vector={}, payload=document)],
                wait=True,
            )

    def set_fields(self, artifact_id: str, fields: dict[str, Any]) -> None:
        """
        Merge fields into the artifact payload. Fields not named keep their values.
        Selecting by filter makes this a no-op for a missing artifact instead of an error.
        """
        with _store_errors("set_payload"):
            self.qdrant_client.set_payload(
                collection_name=self.collection_name,
                payload=fields,
                points=_id_filter(artifact_id),
                wait=True,
            )

    def compare_and_set_like(
        self,
        artifact_id: str,
        expected_likes: int,
        user_id: str,
        fields: dict[str, Any],
    ) -> bool:
        """
        Write fields only while the artifact still has `expected_likes` likes
        and user_id is not in likedBy.

        The write also stores a fresh token under user_id in the like tokens.
        Returns True only if that token is there afterwards, i.e. this write
        applied and not a concurrent one.
        """
        token = uuid.uuid4().hex
        condition = models.Filter(
            must=[
                models.HasIdCondition(has_id=[artifact_id]),
                models.FieldCondition(
                    key="likes", match=models.MatchValue(value=expected_likes)
                ),
            ],
            must_not=[
                models.FieldCondition(
                    key="likedBy", match=models.MatchValue(value=user_id)
                ),
            ],
        )
        with _store_errors("set_payload"):
            like_tokens = self._get_like_tokens(artifact_id)
            if like_tokens is None:
                return False
            # Tokens only change together with likes, so the condition also guards them
            like_tokens[user_id] = token
            self.qdrant_client.set_payload(
                collection_name=self.collection_name,
                payload={**fields, LIKE_TOKENS_FIELD: like_tokens},
                points=condition,
                wait=True,
            )
            like_tokens = self._get_like_tokens(artifact_id)

        return like_tokens is not None and like_tokens.get(user_id) == token

    def _get_like_tokens(self, artifact_id: str) -> dict[str, str] | None:
        records = self.qdrant_client.retrieve(
            collection_name=self.collection_name,
            ids=[artifact_id],
            with_payload=True,
            with_vectors=False,
        )
        if not records:
            return None
        return dict((records[0].payload or {}).get(LIKE_TOKENS_FIELD) or {})

    def delete(self, artifact_id: str) -> int:
        """Delete the artifact. Returns the number of deleted artifacts (0 or 1)."""
        with _store_errors("delete"):
            existing = self.qdrant_client.count(
                collection_name=self.collection_name,
                count_filter=_id_filter(artifact_id),
                exact=True,
            ).count
            if existing == 0:
                return 0
            self.qdrant_client.delete(
                collection_name=self.collection_name,
                points_selector=models.PointIdsList(points=[artifact_id]),
                wait=True,
            )
        return existing
