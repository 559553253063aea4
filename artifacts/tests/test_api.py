"""
Integration tests for the API endpoints.

The artifact service is mocked: these tests pin down routing, request
parsing, status codes and response bodies.
"""

import json
import uuid
from unittest.mock import MagicMock, patch

import pytest
from django.test import Client

from artifacts.src.errors import (
    AlreadyLikedError,
    DeleteFailedError,
    NotFoundError,
    NotFoundOrUnauthorizedError,
    StoreError,
    UpdateFailedError,
    ValidationError,
)
from artifacts.src.services.requests import (
    CreateArtifactRequest,
    CreateArtifactResult,
    DeleteArtifactRequest,
    DeleteArtifactResult,
    LikeArtifactRequest,
    UpdateArtifactRequest,
)
from artifacts.tests.factories import make_artifact_data


ARTIFACT_ID = str(uuid.uuid4())

SAMPLE_ARTIFACT = {
    "_id": ARTIFACT_ID,
    **make_artifact_data(),
    "likes": 1,
    "likedBy": ["fan"],
    "dateAdded": "2024-05-01T12:00:00+00:00",
}


@pytest.fixture
def mock_service():
    mock_service = MagicMock()
    with patch("artifacts.api.views.get_artifact_service", return_value=mock_service):
        yield mock_service


@pytest.fixture
def client():
    return Client()


def _json(data) -> dict:
    return {"data": json.dumps(data), "content_type": "application/json"}


# ---- Per-user collections ----


@pytest.mark.integration
def test_my_artifacts_returns_owned_artifacts(client, mock_service):
    mock_service.list_by_owner.return_value = [SAMPLE_ARTIFACT]

    response = client.get("/my-artifacts/user-1")

    assert response.status_code == 200
    assert response.json() == [SAMPLE_ARTIFACT]
    mock_service.list_by_owner.assert_called_once_with("user-1")


@pytest.mark.integration
def test_my_artifacts_validation_error_is_400(client, mock_service):
    mock_service.list_by_owner.side_effect = ValidationError("User ID is required")

    response = client.get("/my-artifacts/%20")

    assert response.status_code == 400
    assert response.json() == {"error": "User ID is required"}


@pytest.mark.integration
def test_liked_artifacts_returns_liked_artifacts(client, mock_service):
    mock_service.list_liked_by.return_value = [SAMPLE_ARTIFACT]

    response = client.get("/liked-artifacts/fan/")

    assert response.status_code == 200
    assert response.json() == [SAMPLE_ARTIFACT]
    mock_service.list_liked_by.assert_called_once_with("fan")


@pytest.mark.integration
def test_liked_artifacts_store_failure_is_500(client, mock_service):
    mock_service.list_liked_by.side_effect = StoreError("Qdrant scroll failed: timeout")

    response = client.get("/liked-artifacts/fan")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch liked artifacts"}


# ---- Collection routes ----


@pytest.mark.integration
def test_list_artifacts(client, mock_service):
    mock_service.list_all.return_value = [SAMPLE_ARTIFACT]

    response = client.get("/artifacts")

    assert response.status_code == 200
    assert response.json() == [SAMPLE_ARTIFACT]


@pytest.mark.integration
def test_list_artifacts_store_failure_does_not_leak_details(client, mock_service):
    mock_service.list_all.side_effect = StoreError("Qdrant scroll failed: secret-host:6333")

    response = client.get("/artifacts/")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch artifacts"}


@pytest.mark.integration
def test_search_passes_name_fragment(client, mock_service):
    mock_service.search.return_value = [SAMPLE_ARTIFACT]

    response = client.get("/artifacts/search", {"name": "rosetta"})

    assert response.status_code == 200
    assert response.json() == [SAMPLE_ARTIFACT]
    mock_service.search.assert_called_once_with("rosetta")
    mock_service.get_by_id.assert_not_called()


@pytest.mark.integration
def test_search_without_name(client, mock_service):
    mock_service.search.return_value = []

    response = client.get("/artifacts/search/")

    assert response.status_code == 200
    mock_service.search.assert_called_once_with(None)


@pytest.mark.integration
def test_top_liked_route_is_not_treated_as_an_id(client, mock_service):
    mock_service.top_liked.return_value = [SAMPLE_ARTIFACT]

    response = client.get("/artifacts/top-liked")

    assert response.status_code == 200
    assert response.json() == [SAMPLE_ARTIFACT]
    mock_service.top_liked.assert_called_once_with()
    mock_service.get_by_id.assert_not_called()


@pytest.mark.integration
def test_top_liked_logs_result_count(client, mock_service):
    mock_service.top_liked.return_value = [SAMPLE_ARTIFACT, SAMPLE_ARTIFACT]

    with patch("artifacts.api.views.logger") as mock_logger:
        client.get("/artifacts/top-liked")

    mock_logger.info.assert_called_once_with("Found top artifacts: 2")


@pytest.mark.integration
def test_create_artifact_returns_201_with_inserted_id(client, mock_service):
    inserted_id = str(uuid.uuid4())
    mock_service.create.return_value = CreateArtifactResult(inserted_id=inserted_id)
    data = make_artifact_data()

    response = client.post("/artifacts", **_json(data))

    assert response.status_code == 201
    assert response.json() == {
        "message": "Artifact added successfully",
        "insertedId": inserted_id,
    }
    mock_service.create.assert_called_once_with(CreateArtifactRequest(data=data))


@pytest.mark.integration
def test_create_artifact_missing_fields_is_400(client, mock_service):
    mock_service.create.side_effect = ValidationError(
        "Missing required fields: name, historicalContext",
        missing_fields=["name", "historicalContext"],
    )

    response = client.post("/artifacts", **_json({"image": "x"}))

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields: name, historicalContext"}


@pytest.mark.integration
@pytest.mark.parametrize("body", ["{not json", "[1, 2]", '"text"'])
def test_create_artifact_rejects_non_object_body(client, mock_service, body):
    response = client.post("/artifacts", data=body, content_type="application/json")

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON body"}
    mock_service.create.assert_not_called()


# ---- Single artifact routes ----


@pytest.mark.integration
def test_get_artifact(client, mock_service):
    mock_service.get_by_id.return_value = SAMPLE_ARTIFACT

    response = client.get(f"/artifacts/{ARTIFACT_ID}")

    assert response.status_code == 200
    assert response.json() == SAMPLE_ARTIFACT
    mock_service.get_by_id.assert_called_once_with(ARTIFACT_ID)


@pytest.mark.integration
@pytest.mark.parametrize(
    "error, status, message",
    [
        (ValidationError("Invalid artifact ID"), 400, "Invalid artifact ID"),
        (NotFoundError(), 404, "Artifact not found"),
        (StoreError("boom"), 500, "Failed to fetch artifact"),
    ],
)
def test_get_artifact_errors(client, mock_service, error, status, message):
    mock_service.get_by_id.side_effect = error

    response = client.get("/artifacts/some-id")

    assert response.status_code == status
    assert response.json() == {"error": message}


@pytest.mark.integration
def test_update_artifact(client, mock_service):
    mock_service.update.return_value = {**SAMPLE_ARTIFACT, "name": "X"}
    body = {"userId": "user-1", "name": "X"}

    response = client.put(f"/artifacts/{ARTIFACT_ID}", **_json(body))

    assert response.status_code == 200
    assert response.json()["name"] == "X"
    mock_service.update.assert_called_once_with(
        UpdateArtifactRequest(artifact_id=ARTIFACT_ID, user_id="user-1", patch=body)
    )


@pytest.mark.integration
@pytest.mark.parametrize(
    "error, status, message",
    [
        (ValidationError("Invalid artifact ID"), 400, "Invalid artifact ID"),
        (NotFoundOrUnauthorizedError(), 404, "Artifact not found or unauthorized"),
        (UpdateFailedError(), 404, "Failed to update artifact"),
        (StoreError("boom"), 500, "Failed to update artifact"),
    ],
)
def test_update_artifact_errors(client, mock_service, error, status, message):
    mock_service.update.side_effect = error

    response = client.put(f"/artifacts/{ARTIFACT_ID}", **_json({"userId": "user-2"}))

    assert response.status_code == status
    assert response.json() == {"error": message}


@pytest.mark.integration
def test_delete_artifact_reads_user_from_body(client, mock_service):
    mock_service.delete.return_value = DeleteArtifactResult()

    response = client.delete(f"/artifacts/{ARTIFACT_ID}", **_json({"userId": "user-1"}))

    assert response.status_code == 200
    assert response.json() == {"message": "Artifact deleted successfully"}
    mock_service.delete.assert_called_once_with(
        DeleteArtifactRequest(artifact_id=ARTIFACT_ID, user_id="user-1")
    )


@pytest.mark.integration
def test_delete_artifact_reads_user_from_query_string(client, mock_service):
    mock_service.delete.return_value = DeleteArtifactResult()

    response = client.delete(f"/artifacts/{ARTIFACT_ID}?userId=user-1")

    assert response.status_code == 200
    mock_service.delete.assert_called_once_with(
        DeleteArtifactRequest(artifact_id=ARTIFACT_ID, user_id="user-1")
    )


@pytest.mark.integration
@pytest.mark.parametrize(
    "error, status, message",
    [
        (NotFoundOrUnauthorizedError(), 404, "Artifact not found or unauthorized"),
        (DeleteFailedError(), 404, "Failed to delete artifact"),
    ],
)
def test_delete_artifact_errors(client, mock_service, error, status, message):
    mock_service.delete.side_effect = error

    response = client.delete(f"/artifacts/{ARTIFACT_ID}", **_json({"userId": "user-2"}))

    assert response.status_code == status
    assert response.json() == {"error": message}


@pytest.mark.integration
def test_like_artifact(client, mock_service):
    mock_service.like.return_value = SAMPLE_ARTIFACT

    response = client.put(f"/artifacts/{ARTIFACT_ID}/like", **_json({"userId": "fan"}))

    assert response.status_code == 200
    assert response.json() == SAMPLE_ARTIFACT
    mock_service.like.assert_called_once_with(
        LikeArtifactRequest(artifact_id=ARTIFACT_ID, user_id="fan")
    )


@pytest.mark.integration
@pytest.mark.parametrize(
    "error, status, message",
    [
        (ValidationError("User ID is required"), 400, "User ID is required"),
        (AlreadyLikedError(), 400, "You have already liked this artifact"),
        (NotFoundError(), 404, "Artifact not found"),
        (StoreError("boom"), 500, "Failed to like artifact"),
    ],
)
def test_like_artifact_errors(client, mock_service, error, status, message):
    mock_service.like.side_effect = error

    response = client.put(f"/artifacts/{ARTIFACT_ID}/like/", **_json({"userId": "fan"}))

    assert response.status_code == status
    assert response.json() == {"error": message}


# ---- Cross-origin requests ----


@pytest.mark.integration
def test_cross_origin_get_is_allowed(client, mock_service):
    mock_service.list_all.return_value = [SAMPLE_ARTIFACT]

    response = client.get("/artifacts", HTTP_ORIGIN="http://localhost:5173")

    assert response.status_code == 200
    assert response["Access-Control-Allow-Origin"] == "*"


@pytest.mark.integration
def test_cross_origin_preflight_is_answered_before_routing(client, mock_service):
    response = client.options(
        f"/artifacts/{ARTIFACT_ID}/like",
        HTTP_ORIGIN="http://localhost:5173",
        HTTP_ACCESS_CONTROL_REQUEST_METHOD="PUT",
    )

    assert response.status_code == 200
    assert response["Access-Control-Allow-Origin"] == "*"
    assert "PUT" in response["Access-Control-Allow-Methods"]
    mock_service.like.assert_not_called()


# ---- Fallbacks ----


@pytest.mark.integration
def test_unknown_route_returns_json_404(client, mock_service):
    response = client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "Route not found"}


@pytest.mark.integration
def test_wrong_method_returns_405(client, mock_service):
    response = client.post(f"/artifacts/{ARTIFACT_ID}/like", **_json({"userId": "fan"}))

    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}
    assert response["Allow"] == "PUT"
    mock_service.like.assert_not_called()


@pytest.mark.unit
def test_server_error_view_returns_json():
    from artifacts.api.views import server_error_view

    response = server_error_view(MagicMock())

    assert response.status_code == 500
    assert json.loads(response.content) == {"error": "Internal server error"}
