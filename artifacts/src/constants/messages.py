ARTIFACT_ADDED = "Artifact added successfully"
ARTIFACT_DELETED = "Artifact deleted successfully"

INVALID_ARTIFACT_ID = "Invalid artifact ID"
USER_ID_REQUIRED = "User ID is required"
ARTIFACT_NOT_FOUND = "Artifact not found"
NOT_FOUND_OR_UNAUTHORIZED = "Artifact not found or unauthorized"
ALREADY_LIKED = "You have already liked this artifact"
UPDATE_FAILED = "Failed to update artifact"
DELETE_FAILED = "Failed to delete artifact"
INVALID_JSON_BODY = "Invalid JSON body"

ROUTE_NOT_FOUND = "Route not found"
METHOD_NOT_ALLOWED = "Method not allowed"
INTERNAL_SERVER_ERROR = "Internal server error"
