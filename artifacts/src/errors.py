"""Exceptions raised by the artifact service and mapped to HTTP status codes by the API views."""

from artifacts.src.constants import messages


class ArtifactServiceError(Exception):
    """Base class for all artifact service errors."""

    status_code = 500
    default_message = messages.INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ArtifactServiceError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Invalid request"

    def __init__(self, message: str | None = None, missing_fields: list[str] | None = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []


class NotFoundError(ArtifactServiceError):
    status_code = 404
    default_message = messages.ARTIFACT_NOT_FOUND


class NotFoundOrUnauthorizedError(NotFoundError):
    """
    The artifact does not exist or the caller does not own it.
    The two cases are deliberately reported the same way.
    """

    default_message = messages.NOT_FOUND_OR_UNAUTHORIZED


class AlreadyLikedError(ArtifactServiceError):
    status_code = 400
    default_message = messages.ALREADY_LIKED


class UpdateFailedError(ArtifactServiceError):
    """The artifact disappeared between the ownership check and the update."""

    status_code = 404
    default_message = messages.UPDATE_FAILED


class DeleteFailedError(ArtifactServiceError):
    """The artifact disappeared between the ownership check and the delete."""

    status_code = 404
    default_message = messages.DELETE_FAILED


class StoreError(ArtifactServiceError):
    """The underlying Qdrant store failed or could not be reached."""

    status_code = 500
    default_message = "Artifact store unavailable"
