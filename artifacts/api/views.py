import json
import logging

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from artifacts.src.constants import messages
from artifacts.src.errors import ArtifactServiceError, ValidationError
from artifacts.src.services.requests import (
    CreateArtifactRequest,
    DeleteArtifactRequest,
    LikeArtifactRequest,
    UpdateArtifactRequest,
)
from artifacts.src.services.service_factory import get_artifact_service

logger = logging.getLogger(__name__)


def _parse_json_body(request: HttpRequest) -> dict:
    """Parse the request body as a JSON object. An empty body is an empty object."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except ValueError:
        raise ValidationError(messages.INVALID_JSON_BODY) from None
    if not isinstance(data, dict):
        raise ValidationError(messages.INVALID_JSON_BODY)
    return data


def _error_response(error: ArtifactServiceError, failure_message: str) -> JsonResponse:
    """
    Client errors keep their own message. Store failures are logged in full
    and answered with the route's generic failure message.
    """
    if error.status_code >= 500:
        logger.error(f"{failure_message}: {error}", exc_info=error)
        return JsonResponse({"error": failure_message}, status=500)
    return JsonResponse({"error": error.message}, status=error.status_code)


def _method_not_allowed(allowed: list[str]) -> JsonResponse:
    response = JsonResponse({"error": messages.METHOD_NOT_ALLOWED}, status=405)
    response["Allow"] = ", ".join(allowed)
    return response


# ---- Per-user collections ----


def my_artifacts_view(request: HttpRequest, user_id: str):
    if request.method != "GET":
        return _method_not_allowed(["GET"])
    try:
        artifacts = get_artifact_service().list_by_owner(user_id)
    except ArtifactServiceError as e:
        return _error_response(e, "Failed to fetch user artifacts")
    return JsonResponse(artifacts, safe=False)


def liked_artifacts_view(request: HttpRequest, user_id: str):
    if request.method != "GET":
        return _method_not_allowed(["GET"])
    try:
        artifacts = get_artifact_service().list_liked_by(user_id)
    except ArtifactServiceError as e:
        return _error_response(e, "Failed to fetch liked artifacts")
    return JsonResponse(artifacts, safe=False)


# ---- Artifact collection ----


@csrf_exempt
def artifacts_view(request: HttpRequest):
    if request.method == "GET":
        return _list_artifacts()
    if request.method == "POST":
        return _create_artifact(request)
    return _method_not_allowed(["GET", "POST"])


def _list_artifacts() -> JsonResponse:
    try:
        artifacts = get_artifact_service().list_all()
    except ArtifactServiceError as e:
        return _error_response(e, "Failed to fetch artifacts")
    return JsonResponse(artifacts, safe=False)


def _create_artifact(request: HttpRequest) -> JsonResponse:
    try:
        data = _parse_json_body(request)
        result = get_artifact_service().create(CreateArtifactRequest(data=data))
    except ArtifactServiceError as e:
        return _error_response(e, "Failed to add artifact")
    return JsonResponse(
        {"message": result.message, "insertedId": result.inserted_id}, status=201
    )


def search_view(request: HttpRequest):
    if request.method != "GET":
        return _method_not_allowed(["GET"])
    try:
        artifacts = get_artifact_service().search(request.GET.get("name"))
    except ArtifactServiceError as e:
        return _error_response(e, "Failed to search artifacts")
    return JsonResponse(artifacts, safe=False)


def top_liked_view(request: HttpRequest):
    if request.method != "GET":
        return _method_not_allowed(["GET"])
    try:
        artifacts = get_artifact_service().top_liked()
    except ArtifactServiceError as e:
        return _error_response(e, "Failed to fetch top artifacts")
    logger.info(f"Found top artifacts: {len(artifacts)}")
    return JsonResponse(artifacts, safe=False)


# ---- Single artifact ----


@csrf_exempt
def artifact_detail_view(request: HttpRequest, artifact_id: str):
    if request.method == "GET":
        return _get_artifact(artifact_id)
    if request.method == "PUT":
        return _update_artifact(request, artifact_id)
    if request.method == "DELETE":
        return _delete_artifact(request, artifact_id)
    return _method_not_allowed(["GET", "PUT", "DELETE"])


def _get_artifact(artifact_id: str) -> JsonResponse:
    try:
        artifact = get_artifact_service().get_by_id(artifact_id)
    except ArtifactServiceError as e:
        return _error_response(e, "Failed to fetch artifact")
    return JsonResponse(artifact)


def _update_artifact(request: HttpRequest, artifact_id: str) -> JsonResponse:
    try:
        patch = _parse_json_body(request)
        updated = get_artifact_service().update(
            UpdateArtifactRequest(
                artifact_id=artifact_id,
                user_id=patch.get("userId"),
                patch=patch,
            )
        )
    except ArtifactServiceError as e:
        return _error_response(e, messages.UPDATE_FAILED)
    return JsonResponse(updated)


def _delete_artifact(request: HttpRequest, artifact_id: str) -> JsonResponse:
    try:
        body = _parse_json_body(request)
        # userId may also come from the query string
        user_id = body.get("userId") or request.GET.get("userId")
        result = get_artifact_service().delete(
            DeleteArtifactRequest(artifact_id=artifact_id, user_id=user_id)
        )
    except ArtifactServiceError as e:
        return _error_response(e, messages.DELETE_FAILED)
    return JsonResponse({"message": result.message})


@csrf_exempt
def like_view(request: HttpRequest, artifact_id: str):
    if request.method != "PUT":
        return _method_not_allowed(["PUT"])
    try:
        body = _parse_json_body(request)
        updated = get_artifact_service().like(
            LikeArtifactRequest(artifact_id=artifact_id, user_id=body.get("userId"))
        )
    except ArtifactServiceError as e:
        return _error_response(e, "Failed to like artifact")
    return JsonResponse(updated)


# ---- Fallback handlers (wired as handler404/handler500 in djangoconfig.urls) ----


def route_not_found_view(request: HttpRequest, exception=None):
    return JsonResponse({"error": messages.ROUTE_NOT_FOUND}, status=404)


def server_error_view(request: HttpRequest):
    return JsonResponse({"error": messages.INTERNAL_SERVER_ERROR}, status=500)
