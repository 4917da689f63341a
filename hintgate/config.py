from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    ENVIRONMENT: str = "development"
    PORT: int = 8000
    HOST: str = "0.0.0.0"
    LOG_LEVEL: str = "INFO"

    # Request Auth Conf
    APP_SECRET: Optional[str] = None  # Requests are rejected until this is set
    AUTH_MODE: str = "signature"  # "signature" (app secret + HMAC) or "bearer" (Firebase ID token)
    TIMESTAMP_TOLERANCE_SECONDS: int = 300

    # Firebase Conf (bearer mode only)
    FIREBASE_SERVICE_ACCOUNT: Optional[str] = None  # Service account JSON
    FIREBASE_PROJECT_ID: Optional[str] = None

    # Hint Generator Conf
    GROQ_API_KEY: Optional[str] = None
    GROQ_MODEL: str = "llama-3.3-70b-versatile"
    GEMINI_API_KEY: Optional[str] = None  # Secondary provider, tried when Groq fails
    GEMINI_MODEL: str = "gemini-2.5-flash"
    LLM_TIMEOUT_SECONDS: float = 10.0

    # Throttling Conf
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    RATE_LIMIT_MAX: int = 15  # Per IP / device per window
    UID_RATE_LIMIT_MAX: int = 20  # Per Firebase user per window (bearer mode)
    TRUSTED_PROXY_HOPS: int = 0  # Proxies in front of us that append to X-Forwarded-For; 0 ignores the header
    DAILY_DEVICE_LIMIT: int = 200

    # Cache Conf
    CACHE_TTL_SECONDS: int = 24 * 60 * 60
    CACHE_MAX_ENTRIES: int = 1000

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

settings = Settings()
