# pgl_core/iam/webhooks.py
"""
Verification of identity-provider webhooks signed with the Svix scheme:

    signature = base64(HMAC_SHA256(secret, f"{svix-id}.{svix-timestamp}.{body}"))
    svix-signature: "v1,<signature> [v1,<signature> ...]"

The secret is configured as "whsec_<base64 key>".
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import time
from typing import Any, Mapping, Optional

SECRET_PREFIX = "whsec_"
HEADER_ID = "svix-id"
HEADER_TIMESTAMP = "svix-timestamp"
HEADER_SIGNATURE = "svix-signature"


class WebhookVerificationError(Exception):
    pass


def _secret_bytes(secret: str) -> bytes:
    if secret.startswith(SECRET_PREFIX):
        secret = secret[len(SECRET_PREFIX):]
    try:
        return base64.b64decode(secret)
    except (binascii.Error, ValueError) as e:
        raise WebhookVerificationError("Webhook secret is not valid base64.") from e


def compute_signature(*, secret: str, msg_id: str, timestamp: str, body: bytes) -> str:
    to_sign = f"{msg_id}.{timestamp}.".encode() + body
    digest = hmac.new(_secret_bytes(secret), to_sign, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def verify_webhook(
    *,
    secret: str,
    headers: Mapping[str, str],
    body: bytes,
    tolerance_seconds: int = 300,
    now: Optional[float] = None,
) -> dict[str, Any]:
    """
    Returns the decoded JSON payload, or raises WebhookVerificationError.
    """
    msg_id = headers.get(HEADER_ID)
    timestamp = headers.get(HEADER_TIMESTAMP)
    signature_header = headers.get(HEADER_SIGNATURE)

    if not msg_id or not timestamp or not signature_header:
        raise WebhookVerificationError("Missing svix headers.")

    try:
        sent_at = int(timestamp)
    except ValueError as e:
        raise WebhookVerificationError("Invalid svix-timestamp header.") from e

    current = time.time() if now is None else now
    if abs(current - sent_at) > tolerance_seconds:
        raise WebhookVerificationError("Webhook timestamp outside the tolerance window.")

    expected = compute_signature(secret=secret, msg_id=msg_id, timestamp=timestamp, body=body)

    for candidate in signature_header.split():
        version, _, value = candidate.partition(",")
        if version == "v1" and hmac.compare_digest(value, expected):
            break
    else:
        raise WebhookVerificationError("Invalid webhook signature.")

    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise WebhookVerificationError("Webhook body is not valid JSON.") from e
