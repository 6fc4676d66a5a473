from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings
from rest_framework import authentication


@dataclass(frozen=True)
class GatewayUser:
    """Principal forwarded by the auth gateway. Only the id is known here."""
    id: str

    is_authenticated = True
    is_anonymous = False


class GatewayUserAuthentication(authentication.BaseAuthentication):
    """
    Trust the user id header set by the upstream gateway, which has already
    verified the auth provider's access token.
    Missing header -> unauthenticated (401 via IsAuthenticated).
    """

    def authenticate(self, request):
        user_id = (request.headers.get(settings.STUDY_AUTH_HEADER) or "").strip()
        if not user_id:
            return None
        return GatewayUser(id=user_id[:64]), None

    def authenticate_header(self, request):
        return "Bearer"
