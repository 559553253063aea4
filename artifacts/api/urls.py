from django.urls import re_path

from artifacts.api.views import (
    artifact_detail_view,
    artifacts_view,
    like_view,
    liked_artifacts_view,
    my_artifacts_view,
    search_view,
    top_liked_view,
)

# Trailing slashes are optional.
# The literal artifact routes must come before the <artifact_id> routes.
urlpatterns = [
    re_path(r"^my-artifacts/(?P<user_id>[^/]+)/?$", my_artifacts_view),
    re_path(r"^liked-artifacts/(?P<user_id>[^/]+)/?$", liked_artifacts_view),
    re_path(r"^artifacts/?$", artifacts_view),
    re_path(r"^artifacts/search/?$", search_view),
    re_path(r"^artifacts/top-liked/?$", top_liked_view),
    re_path(r"^artifacts/(?P<artifact_id>[^/]+)/like/?$", like_view),
    re_path(r"^artifacts/(?P<artifact_id>[^/]+)/?$", artifact_detail_view),
]
