"""
Admission pipeline for hint requests.
Owns all per-process throttling and cache state so each app (or test) gets isolated instances.
Stages run in a fixed order and the first rejection short-circuits the rest:
auth -> device quota -> rate limit -> validation -> cache -> generation.
"""
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence
from hintgate.config import Settings
from hintgate.errors import AuthError, ClientError, HintGateError, InternalError, ThrottleError
from hintgate.services.hint_cache import HintCache
from hintgate.services.hint_service import HintService, generate_fallback_hints
from hintgate.services.identity import extract_bearer_token
from hintgate.utils.logger import logger
from hintgate.utils.quota import DeviceQuotaTracker
from hintgate.utils.rate_limit import RateLimiter
from hintgate.utils.security import RequestVerifier, mask_identity
from hintgate.utils.validation import validate_input


@dataclass
class HintRequest:
    """Everything the pipeline needs from one inbound HTTP request."""
    body: Dict[str, Any]
    client_ip: str
    app_secret: Optional[str] = None
    signature: Optional[str] = None
    timestamp: Optional[str] = None
    authorization: Optional[str] = None

    @property
    def word(self):
        return self.body.get("word")

    @property
    def topic(self):
        return self.body.get("topic")

    @property
    def difficulty(self):
        return self.body.get("difficulty") or "medium"

    @property
    def language(self):
        return self.body.get("language") or "en"

    @property
    def device_id(self) -> Optional[str]:
        device_id = self.body.get("deviceId")
        return str(device_id) if device_id else None


class HintPipeline:
    def __init__(self, settings: Settings, generators: Sequence = (), token_verifier=None,
                 clock: Callable[[], float] = time.time):
        self.auth_mode = settings.AUTH_MODE.lower()
        if self.auth_mode not in ("signature", "bearer"):
            raise ValueError(f"Unknown AUTH_MODE: {settings.AUTH_MODE}")

        self.verifier = RequestVerifier(settings.APP_SECRET, settings.TIMESTAMP_TOLERANCE_SECONDS, clock)
        self.token_verifier = token_verifier
        self.quota = DeviceQuotaTracker(settings.DAILY_DEVICE_LIMIT, clock)
        self.rate_limiter = RateLimiter(
            limit=settings.UID_RATE_LIMIT_MAX if self.auth_mode == "bearer" else settings.RATE_LIMIT_MAX,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
            clock=clock
        )
        self.cache = HintCache(settings.CACHE_TTL_SECONDS, settings.CACHE_MAX_ENTRIES, clock)
        self.hint_service = HintService(generators, timeout_seconds=settings.LLM_TIMEOUT_SECONDS)

    # ==================== AUTH ====================

    def _check_signature(self, req: HintRequest) -> str:
        """Credential gate + signature verifier. Returns the rate-limit identity (client IP)."""
        if not self.verifier.verify_app_secret(req.app_secret):
            raise AuthError("Invalid app secret", code="INVALID_APP_SECRET")

        if not req.signature or not req.timestamp:
            raise AuthError("Missing signature or timestamp", code="MISSING_SIGNATURE")

        # Timestamp first: no HMAC work for requests that are already expired
        if not self.verifier.is_timestamp_valid(req.timestamp):
            raise AuthError("Request expired", code="EXPIRED_REQUEST")

        word = "" if req.word is None else str(req.word)
        topic = "" if req.topic is None else str(req.topic)
        if not self.verifier.verify_signature(req.signature, word, topic, req.timestamp):
            raise AuthError("Invalid signature", code="INVALID_SIGNATURE")

        return req.client_ip

    async def _check_bearer(self, req: HintRequest) -> str:
        """Bearer-token identity. Returns the Firebase uid as the rate-limit identity."""
        if not req.authorization:
            raise AuthError("Authorization header is required", code="MISSING_AUTH_HEADER")

        token = extract_bearer_token(req.authorization)
        if not token:
            raise AuthError("Authorization header must be: Bearer <token>", code="INVALID_AUTH_FORMAT")

        if self.token_verifier is None:
            raise AuthError("Token verification is not configured", code="INVALID_TOKEN")

        uid = await self.token_verifier.verify(token)
        logger.info(f"Authenticated user: {mask_identity(uid)}")
        return uid

    # ==================== THROTTLING ====================

    def _check_throttles(self, identity: str, device_id: Optional[str]) -> None:
        if device_id:
            quota = self.quota.check_device_limit(device_id)
            if not quota.allowed:
                logger.warning(f"Daily limit reached for device {mask_identity(device_id)}")
                raise ThrottleError("Daily limit reached. Try again tomorrow.",
                                    code="DAILY_LIMIT_EXCEEDED", remaining_time=quota.remaining_time)

        decision = self.rate_limiter.check_rate_limit(identity)
        if not decision.allowed:
            logger.warning(f"Rate limit hit for {mask_identity(identity)}")
            raise ThrottleError("Too many requests. Please wait a moment.",
                                code="RATE_LIMIT_EXCEEDED", retry_after=decision.retry_after)

    # ==================== PIPELINE ====================

    async def process(self, req: HintRequest) -> Dict[str, Any]:
        """Runs every stage for one request and returns the success envelope.

        Unexpected errors before admission are internal errors. Once a request is authorized,
        throttled and validated, unexpected errors are answered with fallback hints instead.
        """
        try:
            word, topic, difficulty, language = await self._admit(req)
        except HintGateError:
            raise
        except Exception as e:
            logger.error(f"Admission error: {str(e)}")
            raise InternalError("Failed to generate hints") from e

        try:
            return await self._serve(word, topic, difficulty, language)
        except Exception as e:
            logger.error(f"API Error: {str(e)}")
            return {
                "success": True,
                "hints": generate_fallback_hints(word, topic),
                "cached": False,
                "fallback": True,
            }

    async def _admit(self, req: HintRequest):
        """Auth, throttling and validation. Returns the normalized (word, topic, difficulty, language)."""
        if self.auth_mode == "bearer":
            identity = await self._check_bearer(req)
        else:
            identity = self._check_signature(req)

        self._check_throttles(identity, req.device_id)

        word, topic, difficulty, language = req.word, req.topic, req.difficulty, req.language
        error = validate_input(word, topic, difficulty, language)
        if error:
            raise ClientError(error)
        return word, topic.lower(), difficulty.lower(), language.lower()

    async def _serve(self, word: str, topic: str, difficulty: str, language: str) -> Dict[str, Any]:
        cache_key = HintCache.make_key(word, topic, language)
        cached_hints = self.cache.get(cache_key)
        if cached_hints:
            logger.info(f"Cache hit for: {cache_key}")
            return {"success": True, "hints": cached_hints, "cached": True}

        logger.info(f"Generating hints for topic '{topic}' ({difficulty}, {language})")
        result = await self.hint_service.generate_hints(word, topic, difficulty, language)

        response = {"success": True, "hints": result.hints, "cached": False}
        if result.fallback:
            response["fallback"] = True
        else:
            self.cache.save(cache_key, result.hints)
        return response
