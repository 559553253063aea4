"""Request and result types passed between the API views and the artifact service."""

from dataclasses import dataclass, field
from typing import Any

from artifacts.src.constants import messages


@dataclass
class CreateArtifactRequest:
    data: dict[str, Any]


@dataclass
class UpdateArtifactRequest:
    artifact_id: str
    user_id: str | None
    patch: dict[str, Any] = field(default_factory=dict)


@dataclass
class DeleteArtifactRequest:
    artifact_id: str
    user_id: str | None


@dataclass
class LikeArtifactRequest:
    artifact_id: str
    user_id: str | None


@dataclass
class CreateArtifactResult:
    inserted_id: str
    message: str = messages.ARTIFACT_ADDED


@dataclass
class DeleteArtifactResult:
    message: str = messages.ARTIFACT_DELETED
