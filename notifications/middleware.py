import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from django.contrib.auth.models import AnonymousUser
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError

logger = logging.getLogger(__name__)


class JWTQueryStringAuthMiddleware:
    """
    Authenticates websocket handshakes from a ``?token=<jwt>`` query parameter.
    Placed inside AuthMiddlewareStack, so a session user wins when present.
    """

    def __init__(self, inner):
        self.inner = inner

    async def __call__(self, scope, receive, send):
        if "user" in scope and not isinstance(scope["user"], AnonymousUser):
            return await self.inner(scope, receive, send)

        params = parse_qs(scope.get("query_string", b"").decode())
        token_list = params.get("token")
        if token_list:
            user = await self.get_user_from_token(token_list[0])
            if user:
                scope["user"] = user
                logger.debug(f"Authenticated user {user.pk} via websocket JWT")
            else:
                logger.debug("Invalid JWT in websocket handshake")

        return await self.inner(scope, receive, send)

    @database_sync_to_async
    def get_user_from_token(self, token):
        try:
            jwt_auth = JWTAuthentication()
            validated_token = jwt_auth.get_validated_token(token)
            return jwt_auth.get_user(validated_token)
        except (InvalidToken, TokenError, AuthenticationFailed):
            return None
