# config/settings/prod.py
from .base import *  # noqa

DEBUG = False

CORS_ALLOW_ALL_ORIGINS = False

# Provider session tokens: RS256, keys from the provider's JWKS endpoint.
SIMPLE_JWT = {
    **SIMPLE_JWT,
    "ALGORITHM": os.getenv("JWT_ALGORITHM", "RS256"),
    "SIGNING_KEY": None,
}

SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
