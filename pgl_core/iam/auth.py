# pgl_core/iam/auth.py

from __future__ import annotations

from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication


class CookieOrHeaderJWTAuthentication(JWTAuthentication):
    """
    Authenticate the identity provider's session token from:
      1) Authorization: Bearer <token>
      2) the provider's session cookie (SIMPLE_JWT["AUTH_COOKIE"], "__session")

    The token's `sub` claim is matched against User.username (the provider's
    subject id, written by the identity webhook). Role claims stay on the
    validated token (request.auth) and are read by pgl_core.iam.context.
    """

    def authenticate(self, request):
        # 1) Prefer Authorization header
        header = self.get_header(request)
        if header:
            return super().authenticate(request)

        # 2) Cookie session token
        cookie_name = settings.SIMPLE_JWT.get("AUTH_COOKIE", "__session")
        raw_token = request.COOKIES.get(cookie_name)
        if not raw_token:
            return None

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token
