"""
Request Signing

Slack signs every request it sends to an app with
v0=hex(HMAC-SHA256(signing_secret, "v0:" + timestamp + ":" + body)).
The harness signs its synthetic events and callbacks the same way so the
application under test can keep its verification enabled.
"""

import hashlib
import hmac
import time
from typing import Optional, Tuple, Union

SIGNATURE_HEADER = "X-Slack-Signature"
TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
VERSION = "v0"


def _as_text(body: Union[str, bytes]) -> str:
    return body.decode("utf-8") if isinstance(body, bytes) else body


def compute_signature(secret: str, timestamp: str, body: Union[str, bytes]) -> str:
    base = f"{VERSION}:{timestamp}:{_as_text(body)}"
    digest = hmac.new(secret.encode("utf-8"), base.encode("utf-8"), hashlib.sha256).hexdigest()
    return f"{VERSION}={digest}"


def sign(secret: str, body: Union[str, bytes], now: Optional[float] = None) -> Tuple[str, str]:
    """Returns (signature, timestamp) for a body sent now."""
    timestamp = str(int(now if now is not None else time.time()))
    return compute_signature(secret, timestamp, body), timestamp


def signed_headers(secret: str, body: Union[str, bytes]) -> dict:
    signature, timestamp = sign(secret, body)
    return {SIGNATURE_HEADER: signature, TIMESTAMP_HEADER: timestamp}


def verify_signature(
    secret: str,
    timestamp: str,
    body: Union[str, bytes],
    signature: str,
    tolerance: int = 300,
    now: Optional[float] = None,
) -> bool:
    """
    Checks a signature the way a receiving app does, rejecting timestamps
    further than `tolerance` seconds from `now`.
    """
    try:
        sent_at = int(timestamp)
    except (TypeError, ValueError):
        return False

    current = now if now is not None else time.time()
    if abs(current - sent_at) > tolerance:
        return False

    expected = compute_signature(secret, timestamp, body)
    return hmac.compare_digest(expected, signature)
