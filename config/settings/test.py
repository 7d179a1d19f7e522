# config/settings/test.py
from .base import *  # noqa

SECRET_KEY = "test-secret-key"
DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

SIMPLE_JWT = {
    **SIMPLE_JWT,
    "ALGORITHM": "HS256",
    "SIGNING_KEY": "test-jwt-signing-key-0123456789abcdef",
    "VERIFYING_KEY": None,
    "JWK_URL": None,
    "ISSUER": None,
}

# base64("test-webhook-secret")
CLERK_WEBHOOK_SECRET = "whsec_dGVzdC13ZWJob29rLXNlY3JldA=="

LOGGING["loggers"]["pgl_core"]["level"] = "WARNING"
