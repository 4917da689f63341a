"""
Error taxonomy for the hint gateway.
Every rejection raised on the request path carries a machine-readable code and the
HTTP status it maps to; the app-level handler in main.py turns them into the JSON envelope.
"""
from typing import Optional


class HintGateError(Exception):
    """Base class for all errors that are rendered to the caller."""
    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ClientError(HintGateError):
    """Malformed or invalid input. Never retried."""
    status_code = 400
    code = "VALIDATION_ERROR"


class AuthError(HintGateError):
    """Bad app secret, signature, expired timestamp or bearer token."""
    status_code = 401
    code = "UNAUTHORIZED"


class ThrottleError(HintGateError):
    """Rate or daily quota ceiling reached."""
    status_code = 429
    code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, message: str, code: Optional[str] = None,
                 retry_after: Optional[int] = None, remaining_time: Optional[int] = None):
        super().__init__(message, code)
        self.retry_after = retry_after
        self.remaining_time = remaining_time


class ProviderError(HintGateError):
    """Hint generator unavailable or returned garbage. Always absorbed into a fallback."""
    status_code = 502
    code = "PROVIDER_ERROR"


class InternalError(HintGateError):
    status_code = 500
    code = "INTERNAL_ERROR"
