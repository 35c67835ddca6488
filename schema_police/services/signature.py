"""
Webhook signature verification.

GitHub signs every delivery with ``X-Hub-Signature: sha1=<hex hmac>`` keyed by
the app's webhook secret.
"""

import hashlib
import hmac
from typing import Optional, Union

from schema_police.utils.logging import get_logger

logger = get_logger(__name__)

SIGNATURE_PREFIX = "sha1="


def _to_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def sign_payload(secret: Union[str, bytes], payload: bytes) -> str:
    """
    Compute the ``X-Hub-Signature`` header value for a payload.

    Args:
        secret: Webhook secret
        payload: Raw request body

    Returns:
        Signature in the form ``sha1=<hex digest>``
    """
    digest = hmac.new(_to_bytes(secret), payload, hashlib.sha1).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(
    secret: Optional[Union[str, bytes]],
    payload: Optional[bytes],
    signature: Optional[str]
) -> bool:
    """
    Verify webhook signature for security.

    Args:
        secret: Webhook secret shared with GitHub
        payload: Raw request payload
        signature: Value of the ``X-Hub-Signature`` header

    Returns:
        True if signature is valid, False otherwise
    """
    if not secret or not payload or not signature:
        logger.warning("Missing secret, payload or signature header")
        return False

    expected = sign_payload(secret, payload)

    # Compare signatures (constant-time comparison)
    is_valid = hmac.compare_digest(expected.encode("ascii"), _to_bytes(signature))
    if not is_valid:
        logger.warning("Webhook signature verification failed")
    return is_valid
