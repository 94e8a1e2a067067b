"""
ASGI config for the PrintHub backend.

Serves HTTP through Django and the notification websocket through Channels.
"""

import os

import django
from channels.auth import AuthMiddlewareStack
from channels.routing import ProtocolTypeRouter, URLRouter
from channels.security.websocket import AllowedHostsOriginValidator
from django.core.asgi import get_asgi_application


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "printhubBackend.settings")

# Populate the app registry before importing consumers that touch the ORM.
django.setup()

django_asgi_app = get_asgi_application()

import notifications.routing  # noqa: E402
from notifications.middleware import JWTQueryStringAuthMiddleware  # noqa: E402


application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": AllowedHostsOriginValidator(
            AuthMiddlewareStack(JWTQueryStringAuthMiddleware(URLRouter(notifications.routing.websocket_urlpatterns)))
        ),
    }
)
