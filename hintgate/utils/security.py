"""
Security utilities for the hint gateway.
Handles: app secret check, request signature verification, replay window, and identity masking.
"""
import hashlib
import hmac
import time
from typing import Callable, Optional


def generate_signature(word: str, topic: str, timestamp, secret: str) -> str:
    """Signs a hint request the way clients must: HMAC-SHA256 over "word:topic:timestamp", hex encoded."""
    data = f"{word}:{topic}:{timestamp}"
    return hmac.new(
        secret.encode("utf-8"),
        data.encode("utf-8", "surrogatepass"),
        hashlib.sha256
    ).hexdigest()


class RequestVerifier:
    """Credential gate + signature verifier bound to one shared secret.

    The timestamp window bounds replay exposure to +/- tolerance around the verifier clock.
    Signatures seen inside that window are NOT de-duplicated.
    """

    def __init__(self, secret: Optional[str], tolerance_seconds: int = 300,
                 clock: Callable[[], float] = time.time):
        self.secret = secret
        self.tolerance_ms = tolerance_seconds * 1000
        self.clock = clock

    def verify_app_secret(self, presented: Optional[str]) -> bool:
        """Fails closed: no configured secret or no presented secret means reject."""
        if not self.secret or not presented:
            return False
        return hmac.compare_digest(presented.encode("utf-8", "surrogatepass"), self.secret.encode("utf-8"))

    def is_timestamp_valid(self, timestamp) -> bool:
        """Timestamp is epoch milliseconds and must be within the tolerance of now."""
        try:
            request_time = int(str(timestamp).strip())
        except (TypeError, ValueError):
            return False
        now_ms = int(self.clock() * 1000)
        return abs(now_ms - request_time) <= self.tolerance_ms

    def verify_signature(self, signature: Optional[str], word: str, topic: str, timestamp) -> bool:
        if not self.secret or not signature:
            return False
        expected_sig = generate_signature(word, topic, timestamp, self.secret)
        return hmac.compare_digest(expected_sig.encode("utf-8"), signature.encode("utf-8", "surrogatepass"))


def mask_identity(identity: str) -> str:
    """Masks a device id or IP for safe logging.
    Example: test-device-001 → te****-001
    """
    if not identity or len(identity) <= 6:
        return "****"
    return identity[:2] + "****" + identity[-4:]
