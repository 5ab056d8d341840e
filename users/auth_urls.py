"""
Authentication endpoints, mounted under ``/api/auth/``.

Credential issuance is delegated entirely to SimpleJWT; the websocket
handshake consumes the access token produced here.
"""
from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

urlpatterns = [
    path("token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
]
