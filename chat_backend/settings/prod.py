"""
Production settings for the chat backend.

Secrets and hosts must come from the environment; the insecure defaults
of the base module are refused.  HTTPS is enforced end to end, including
the websocket origin check.
"""
import os

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa

DEBUG = False

if SECRET_KEY == "dev-insecure":  # noqa: F405
    raise ImproperlyConfigured("DJANGO_SECRET_KEY must be set in production.")
if not os.getenv("DJANGO_ALLOWED_HOSTS"):
    raise ImproperlyConfigured("DJANGO_ALLOWED_HOSTS must be set in production.")

# AllowedHostsOriginValidator on the websocket reuses ALLOWED_HOSTS
CSRF_TRUSTED_ORIGINS = [f"https://{h}" for h in ALLOWED_HOSTS if h != "*"]  # noqa: F405
CORS_ALLOWED_ORIGINS = [  # noqa: F405
    o for o in CORS_ALLOWED_ORIGINS if not o.startswith("http://localhost")  # noqa: F405
]

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_SSL_REDIRECT = True
SECURE_HSTS_SECONDS = int(os.getenv("SECURE_HSTS_SECONDS", "31536000"))
SECURE_HSTS_INCLUDE_SUBDOMAINS = True

# bounded per-channel buffers; a full channel is a dropped push, not a stall
CHANNEL_LAYERS["default"]["CONFIG"].update(  # noqa: F405
    {"capacity": int(os.getenv("CHANNEL_LAYER_CAPACITY", "200")), "expiry": 30}
)

LOGGING["loggers"]["channels"]["level"] = "ERROR"  # noqa: F405
