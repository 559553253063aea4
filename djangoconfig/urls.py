from django.urls import include, path

urlpatterns = [
    path("", include("artifacts.api.urls")),
]

handler404 = "artifacts.api.views.route_not_found_view"
handler500 = "artifacts.api.views.server_error_view"
