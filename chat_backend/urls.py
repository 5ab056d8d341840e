"""
URL configuration for the realtime chat backend.
REST endpoints live under the `/api/` prefix; the websocket surface is
routed separately in `chat_backend.routing`.
"""

from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path("admin/", admin.site.urls),

    path("api/", RedirectView.as_view(pattern_name="swagger-ui", permanent=False)),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    # Auth endpoints (token issuance is delegated to SimpleJWT)
    path("api/auth/", include("users.auth_urls")),
    path("api/users/", include("users.urls")),
    path("api/messaging/", include("messaging.urls")),
]
