"""
Artifact lifecycle, ownership checks, likes, and the search/ranking queries.

All validation and authorization happens here, before any mutating store
call. The store is injected so the service holds no connection state of
its own.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from artifacts.src.constants.artifacts import (
    LIKE_TOKENS_FIELD,
    LIKE_WRITE_ATTEMPTS,
    PROTECTED_FIELDS,
    REQUIRED_FIELDS,
    TOP_LIKED_LIMIT,
)
from artifacts.src.constants import messages
from artifacts.src.errors import (
    AlreadyLikedError,
    DeleteFailedError,
    NotFoundError,
    NotFoundOrUnauthorizedError,
    StoreError,
    UpdateFailedError,
    ValidationError,
)
from artifacts.src.services.artifact_store import QdrantArtifactStore
from artifacts.src.services.requests import (
    CreateArtifactRequest,
    CreateArtifactResult,
    DeleteArtifactRequest,
    DeleteArtifactResult,
    LikeArtifactRequest,
    UpdateArtifactRequest,
)

logger = logging.getLogger(__name__)


def is_missing(value: Any) -> bool:
    """None and the empty string count as missing. 0 and False do not."""
    return value is None or value == ""


def find_missing_fields(data: dict[str, Any]) -> list[str]:
    """Return every required field that is missing, in declaration order."""
    missing = [field for field in REQUIRED_FIELDS if is_missing(data.get(field))]

    # addedBy must identify its owner
    added_by = data.get("addedBy")
    if "addedBy" not in missing and (
        not isinstance(added_by, dict) or is_missing(added_by.get("uid"))
    ):
        missing.append("addedBy")

    return missing


def parse_artifact_id(artifact_id: Any) -> str:
    """Return the canonical form of a well-formed artifact id, else raise ValidationError."""
    try:
        return str(uuid.UUID(artifact_id))
    except (ValueError, TypeError, AttributeError):
        raise ValidationError(messages.INVALID_ARTIFACT_ID) from None


def require_user_id(user_id: Any) -> str:
    if not isinstance(user_id, str) or is_missing(user_id):
        raise ValidationError(messages.USER_ID_REQUIRED)
    return user_id


class ArtifactService:
    def __init__(self, store: QdrantArtifactStore):
        self.store = store

    # ---- Queries ----

    def list_all(self) -> list[dict]:
        return self.store.find()

    def list_by_owner(self, user_id: str | None) -> list[dict]:
        return self.store.find_by_owner(require_user_id(user_id))

    def list_liked_by(self, user_id: str | None) -> list[dict]:
        return self.store.find_liked_by(require_user_id(user_id))

    def search(self, name_fragment: str | None = None) -> list[dict]:
        """
        Case-insensitive substring search on artifact names.
        Without a fragment every artifact is returned.
        """
        if is_missing(name_fragment):
            return self.list_all()

        fragment = str(name_fragment).casefold()
        return [
            artifact
            for artifact in self.list_all()
            if isinstance(artifact.get("name"), str)
            and fragment in artifact["name"].casefold()
        ]

    def top_liked(self, limit: int = TOP_LIKED_LIMIT) -> list[dict]:
        """Most liked artifacts first. Ties keep the store's order."""
        if not isinstance(limit, int) or limit < 1:
            raise ValidationError("Limit must be a positive integer")
        return self.store.find_top_liked(limit)

    def get_by_id(self, artifact_id: str) -> dict:
        artifact = self.store.get(parse_artifact_id(artifact_id))
        if artifact is None:
            raise NotFoundError(messages.ARTIFACT_NOT_FOUND)
        return artifact

    # ---- Mutations ----

    def create(self, request: CreateArtifactRequest) -> CreateArtifactResult:
        missing_fields = find_missing_fields(request.data)
        if missing_fields:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing_fields)}",
                missing_fields=missing_fields,
            )

        document = {
            key: value
            for key, value in request.data.items()
            if key not in ("_id", "id", LIKE_TOKENS_FIELD)
        }
        # System-managed fields always start from scratch
        document.update(
            {
                "likes": 0,
                "likedBy": [],
                "dateAdded": datetime.now(timezone.utc).isoformat(),
            }
        )

        artifact_id = str(uuid.uuid4())
        self.store.insert(artifact_id, document)
        logger.info(
            f"Created artifact {artifact_id} for user {document['addedBy']['uid']}"
        )
        return CreateArtifactResult(inserted_id=artifact_id)

    def _get_owned(self, artifact_id: str, user_id: Any) -> dict:
        # A missing or malformed user can't own anything
        if not isinstance(user_id, str) or is_missing(user_id):
            raise NotFoundOrUnauthorizedError()
        artifact = self.store.get_owned(artifact_id, user_id)
        if artifact is None:
            raise NotFoundOrUnauthorizedError()
        return artifact

    def update(self, request: UpdateArtifactRequest) -> dict:
        artifact_id = parse_artifact_id(request.artifact_id)
        self._get_owned(artifact_id, request.user_id)

        fields = {
            key: value
            for key, value in request.patch.items()
            if key not in PROTECTED_FIELDS
        }
        if fields:
            self.store.set_fields(artifact_id, fields)

        updated = self.store.get(artifact_id)
        if updated is None:
            raise UpdateFailedError()

        logger.info(f"Updated artifact {artifact_id} fields: {sorted(fields)}")
        return updated

    def delete(self, request: DeleteArtifactRequest) -> DeleteArtifactResult:
        artifact_id = parse_artifact_id(request.artifact_id)
        self._get_owned(artifact_id, request.user_id)

        deleted_count = self.store.delete(artifact_id)
        if deleted_count == 0:
            raise DeleteFailedError()

        logger.info(f"Deleted artifact {artifact_id}")
        return DeleteArtifactResult()

    def like(self, request: LikeArtifactRequest) -> dict:
        """
        Register the user's like: likes goes up by one and the user is
        appended to likedBy, in one conditional write.

        The write only applies while the artifact is unchanged since it was
        read. A like that loses to another user's like is re-read and
        re-applied. One that loses to the same user's concurrent like finds
        the user on re-read and is rejected as already liked.
        """
        artifact_id = parse_artifact_id(request.artifact_id)
        user_id = require_user_id(request.user_id)

        for attempt in range(1, LIKE_WRITE_ATTEMPTS + 1):
            artifact = self._get_not_yet_liked(artifact_id, user_id)
            liked_by = list(artifact.get("likedBy") or [])
            likes = artifact.get("likes", 0)
            applied = self.store.compare_and_set_like(
                artifact_id,
                expected_likes=likes,
                user_id=user_id,
                fields={"likes": likes + 1, "likedBy": liked_by + [user_id]},
            )

            if applied:
                updated = self.store.get(artifact_id)
                if updated is None:
                    raise NotFoundError(messages.ARTIFACT_NOT_FOUND)
                logger.info(f"User {user_id} liked artifact {artifact_id}")
                return updated

            logger.info(
                f"Like on artifact {artifact_id} lost a concurrent write (attempt {attempt})"
            )

        # The last lost write may have been this user's own concurrent like
        self._get_not_yet_liked(artifact_id, user_id)
        raise StoreError(
            f"Like on artifact {artifact_id} not applied after {LIKE_WRITE_ATTEMPTS} attempts"
        )

    def _get_not_yet_liked(self, artifact_id: str, user_id: str) -> dict:
        artifact = self.store.get(artifact_id)
        if artifact is None:
            raise NotFoundError(messages.ARTIFACT_NOT_FOUND)
        if user_id in (artifact.get("likedBy") or []):
            logger.info(f"User {user_id} already liked artifact {artifact_id}")
            raise AlreadyLikedError()
        return artifact
